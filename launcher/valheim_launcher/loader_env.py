"""
loader_env.py — BepInEx / Unity Doorstop injection environment
--------------------------------------------------------------
Resolves every variable the doorstop loader needs (library preload on Linux,
library insertion on macOS, preloader entry, corlib override) into a single
immutable value, decides whether a modded install is present, and renders the
variables that get applied to the server process.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union
from .env_resolver import PathProbe, fetch_var, resolve_path
from .logging_setup import get_logger

log = get_logger("valheim.launcher.bepinex")

LD_PRELOAD_VAR = "LD_PRELOAD"
LD_LIBRARY_PATH_VAR = "LD_LIBRARY_PATH"
DYLD_LIBRARY_PATH_VAR = "DYLD_LIBRARY_PATH"
DYLD_INSERT_LIBRARIES_VAR = "DYLD_INSERT_LIBRARIES"
DOORSTOP_ENABLE_VAR = "DOORSTOP_ENABLE"
DOORSTOP_LIB_VAR = "DOORSTOP_LIB"
DOORSTOP_LIBS_VAR = "DOORSTOP_LIBS"
DOORSTOP_INVOKE_DLL_PATH_VAR = "DOORSTOP_INVOKE_DLL_PATH"
DOORSTOP_CORLIB_OVERRIDE_PATH_VAR = "DOORSTOP_CORLIB_OVERRIDE_PATH"

DEFAULT_DOORSTOP_LIB = "libdoorstop_x64.so"
PRELOADER_DLL = "BepInEx.Preloader.dll"

# (variable, LoaderEnvironment field, wrap value in literal double quotes)
LAUNCH_VARIABLES: Tuple[Tuple[str, str, bool], ...] = (
    (DOORSTOP_ENABLE_VAR, "enable_flag", False),
    (DOORSTOP_INVOKE_DLL_PATH_VAR, "invoke_entry_path", False),
    (DOORSTOP_CORLIB_OVERRIDE_PATH_VAR, "managed_lib_override_path", False),
    (LD_LIBRARY_PATH_VAR, "library_search_path", False),
    (LD_PRELOAD_VAR, "preload_list", False),
    # the dyld consumer only picks this one up when quoted
    (DYLD_LIBRARY_PATH_VAR, "platform_library_search_path", True),
    (DYLD_INSERT_LIBRARIES_VAR, "platform_insert_libraries", False),
)


def format_launch_value(value: str, quoted: bool) -> str:
    return f'"{value}"' if quoted else value


def _append_preload(existing: str, library: str) -> str:
    """
    Add ``library`` to an LD_PRELOAD value as a separate ':' entry.

    The existing value is never glued directly onto the library name, which
    would merge two entries into one bogus file name.
    """
    if not existing:
        return library
    return f"{existing}:{library}"


@dataclass(frozen=True)
class LoaderEnvironment:
    preload_list: str
    library_search_path: str
    enable_flag: str
    invoke_entry_path: str
    managed_lib_override_path: str
    platform_library_search_path: str
    platform_insert_libraries: str

    @classmethod
    def build(
        cls,
        game_root: Union[str, Path],
        loader_root: Union[str, Path],
        environ: Optional[Mapping[str, str]] = None,
        exists: Optional[PathProbe] = None,
    ) -> "LoaderEnvironment":
        """
        Build the loader environment from the ambient variables in ``environ``.

        Nothing is written to disk; ``exists`` is only consulted to choose
        between the game-local and BepInEx-local doorstop directories.
        """
        if environ is None:
            environ = os.environ
        game_dir = str(game_root)
        bepinex_dir = str(loader_root)
        preloader_dll = f"{bepinex_dir}/core/{PRELOADER_DLL}"

        log.debug("Parsing Doorstop locations.")
        doorstop_lib = fetch_var(DOORSTOP_LIB_VAR, DEFAULT_DOORSTOP_LIB, environ)
        doorstop_libs = resolve_path(
            DOORSTOP_LIBS_VAR,
            f"{game_dir}/doorstop_libs",
            f"{bepinex_dir}/doorstop",
            environ,
            exists,
        )
        doorstop_invoke_dll = fetch_var(DOORSTOP_INVOKE_DLL_PATH_VAR, preloader_dll, environ)
        doorstop_corlib_override_path = resolve_path(
            DOORSTOP_CORLIB_OVERRIDE_PATH_VAR,
            f"{game_dir}/unstripped_corlib",
            f"{bepinex_dir}/core_lib",
            environ,
            exists,
        )
        doorstop_base_dll = f"{doorstop_libs}/{doorstop_lib}"

        log.debug("Parsing LD locations.")
        ld_preload = _append_preload(fetch_var(LD_PRELOAD_VAR, "", environ), doorstop_lib)
        ld_library_path = fetch_var(LD_LIBRARY_PATH_VAR, f"./linux64:{doorstop_libs}", environ)

        log.debug("Parsing DYLD locations.")
        dyld_library_path = fetch_var(DYLD_LIBRARY_PATH_VAR, doorstop_libs, environ)
        dyld_insert_libraries = fetch_var(DYLD_INSERT_LIBRARIES_VAR, doorstop_base_dll, environ)

        return cls(
            preload_list=ld_preload,
            library_search_path=ld_library_path,
            enable_flag=str(True).upper(),
            invoke_entry_path=doorstop_invoke_dll,
            managed_lib_override_path=doorstop_corlib_override_path,
            platform_library_search_path=dyld_library_path,
            platform_insert_libraries=dyld_insert_libraries,
        )

    def is_installed(self, exists: Optional[PathProbe] = None) -> bool:
        """True iff the doorstop library and the BepInEx preloader are both on disk."""
        if exists is None:
            exists = os.path.exists
        log.debug("Checking for BepInEx specific files...")
        # the corlib override is optional on a valid install, so it is not checked
        required = (self.platform_insert_libraries, self.invoke_entry_path)
        found = all(exists(p) for p in required)
        if found:
            log.debug("Found all files required for BepInEx to run.")
        else:
            log.debug("No modded instance found, a normal instance will be launched.")
        return found

    def launch_variables(self) -> Dict[str, str]:
        return {
            var: format_launch_value(getattr(self, field), quoted)
            for var, field, quoted in LAUNCH_VARIABLES
        }

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
