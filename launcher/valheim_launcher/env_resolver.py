"""
Environment variable and path resolution for the doorstop/BepInEx loader.

Every lookup takes an explicit environment snapshot and a filesystem probe,
so callers (and tests) decide which process environment and which disk
are consulted. Both default to the real ones.
"""

from __future__ import annotations
import os
from typing import Callable, Mapping, Optional

PathProbe = Callable[[str], bool]


def fetch_var(name: str, default: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Return ``environ[name]``, or ``default`` when unset or empty."""
    if environ is None:
        environ = os.environ
    value = environ.get(name)
    if not value:
        return default
    return value


def resolve_path(
    name: str,
    default: str,
    alternate: str,
    environ: Optional[Mapping[str, str]] = None,
    exists: Optional[PathProbe] = None,
) -> str:
    """
    Resolve a path-valued variable with a three-way fallback.

    The override from ``environ`` wins, otherwise ``default`` is used. If the
    chosen path is missing on disk but ``alternate`` is present, ``alternate``
    is returned instead. When neither exists the chosen path is returned
    unchanged; a missing loader simply shows up later as "not installed".
    """
    if exists is None:
        exists = os.path.exists
    output = fetch_var(name, default, environ)
    if not exists(output) and exists(alternate):
        return alternate
    return output
