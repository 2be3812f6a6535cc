from __future__ import annotations
import argparse
import json
import uvicorn
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .orchestrator import Orchestrator
from .api import create_app

log = get_logger("valheim.launcher.cli")

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="valheim-launcher")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("env", help="Print the resolved BepInEx/doorstop environment as JSON")
    sub.add_parser("mods", help="Print BepInEx state and installed plugins as JSON")

    start_p = sub.add_parser("start", help="Start the Valheim server (with BepInEx when installed)")
    start_p.add_argument("--vanilla", action="store_true", help="Ignore BepInEx and launch an unmodded server")
    start_p.add_argument("--wait", action="store_true", help="Block until the server exits and return its exit code")

    api_p = sub.add_parser("api", help="Run read-only REST API (FastAPI)")
    api_p.add_argument("--host", default="0.0.0.0")
    api_p.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    settings = Settings()
    setup_logging(settings)
    orch = Orchestrator(settings)

    if args.cmd == "env":
        env = orch.build_loader_env()
        out = {
            "installed": orch.loader_installed(env),
            "variables": env.launch_variables(),
            "resolved": env.to_dict(),
        }
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return 0

    if args.cmd == "mods":
        print(json.dumps(orch.loader_status().model_dump(), indent=2, ensure_ascii=False))
        return 0

    if args.cmd == "start":
        orch.prepare_environment()
        try:
            return orch.start_server(vanilla=args.vanilla, wait=args.wait)
        except OSError:
            log.exception("Failed to launch the Valheim server")
            return 1

    if args.cmd == "api":
        app = create_app(settings, orch)
        uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
        return 0

    return 2
