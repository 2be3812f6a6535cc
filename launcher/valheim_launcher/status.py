from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel, Field
from .env_resolver import PathProbe
from .loader_env import LoaderEnvironment
from .manifests import ModInfo, discover_mods


class LoaderStatus(BaseModel):
    """BepInEx state as shown by the status endpoint: ``{enabled, mods}``."""

    enabled: bool
    mods: List[ModInfo] = Field(default_factory=list)

    @classmethod
    def disabled(cls) -> "LoaderStatus":
        return cls(enabled=False, mods=[])

    @classmethod
    def collect(
        cls,
        env: LoaderEnvironment,
        plugins_dir: Union[str, Path],
        exists: Optional[PathProbe] = None,
    ) -> "LoaderStatus":
        return cls(
            enabled=env.is_installed(exists),
            mods=discover_mods(env, plugins_dir, exists),
        )
