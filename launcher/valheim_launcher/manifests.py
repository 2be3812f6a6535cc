"""
manifests.py — Installed BepInEx plugin discovery
-------------------------------------------------
Scans the BepInEx plugin tree for Thunderstore-style ``manifest.json`` files
and turns each one into a ``ModInfo``. Plugin packages are maintained
independently, so a broken manifest only drops that one entry.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, ValidationError
from .env_resolver import PathProbe
from .loader_env import LoaderEnvironment
from .logging_setup import get_logger

log = get_logger("valheim.launcher.mods")

MANIFEST_NAME = "manifest.json"


class PluginManifest(BaseModel):
    name: str
    version_number: str
    website_url: str
    description: str
    dependencies: List[str]


class ModInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    version: str
    dependency_string: str
    website_url: str
    description: str
    dependencies: List[str]


def author_name(folder_name: str) -> str:
    """
    Author part of a Thunderstore package folder name.

    ``"Author-ModName"`` -> ``"Author"``; a name without ``-`` is returned whole.
    """
    return folder_name.split("-", 1)[0]


def read_manifest(path: Union[str, Path]) -> Optional[ModInfo]:
    """Parse one manifest file, or return None if it cannot be read or validated."""
    location = os.path.abspath(str(path))
    author = author_name(os.path.basename(os.path.dirname(location)))
    try:
        raw = Path(location).read_text(encoding="utf-8-sig")
        manifest = PluginManifest.model_validate_json(raw)
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        log.debug("Skipping unreadable manifest %s: %s", location, e)
        return None

    return ModInfo(
        name=manifest.name,
        location=location,
        version=manifest.version_number,
        dependency_string=f"{author}-{manifest.name}-{manifest.version_number}",
        website_url=manifest.website_url,
        description=manifest.description,
        dependencies=list(manifest.dependencies),
    )


def find_manifests(plugins_dir: Union[str, Path]) -> List[str]:
    # pathlib globbing also descends into dot-directories
    root = Path(plugins_dir)
    if not root.is_dir():
        return []
    return [str(p) for p in root.rglob(MANIFEST_NAME) if p.is_file()]


def discover_mods(
    env: LoaderEnvironment,
    plugins_dir: Union[str, Path],
    exists: Optional[PathProbe] = None,
) -> List[ModInfo]:
    """
    List every plugin installed under ``plugins_dir``.

    Returns an empty list without touching the plugin tree when BepInEx is not
    installed. Order follows filesystem traversal.
    """
    if not env.is_installed(exists):
        return []

    mods: List[ModInfo] = []
    for path in find_manifests(plugins_dir):
        info = read_manifest(path)
        if info is not None:
            mods.append(info)
    log.debug("Discovered %d plugin manifest(s) under %s", len(mods), plugins_dir)
    return mods
