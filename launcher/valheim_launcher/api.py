from __future__ import annotations
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from .settings import Settings
from .orchestrator import Orchestrator
from .status import LoaderStatus

class ActionResult(BaseModel):
    ok: bool
    detail: str | None = None
    data: dict | None = None

def create_app(settings: Settings, orch: Orchestrator | None = None) -> FastAPI:
    app = FastAPI(title="Valheim Launcher API", version="0.3.0")
    orch = orch or Orchestrator(settings)

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/status", response_model=ActionResult)
    def status():
        # resolved per request so an install done after startup shows up
        try:
            bepinex = orch.loader_status()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return ActionResult(ok=True, data={"bepinex": bepinex.model_dump()})

    @app.get("/mods", response_model=LoaderStatus)
    def mods():
        try:
            return orch.loader_status()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/environment", response_model=ActionResult)
    def environment():
        env = orch.build_loader_env()
        return ActionResult(
            ok=True,
            data={
                "installed": orch.loader_installed(env),
                "variables": env.launch_variables(),
                "resolved": env.to_dict(),
            },
        )

    return app
