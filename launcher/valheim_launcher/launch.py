"""
launch.py — Start the server process, optionally under BepInEx
--------------------------------------------------------------
A ``LaunchCommand`` is a prepared but not-yet-started process. ``launch``
layers the doorstop variables on top of it before spawning; spawn errors
(missing executable, permissions) reach the caller as the original OSError.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional
from .loader_env import LoaderEnvironment
from .process_runner import ProcessHandle, ProcessRunner
from .logging_setup import get_logger

log = get_logger("valheim.launcher.launch")


@dataclass
class LaunchCommand:
    name: str
    argv: List[str]
    cwd: Optional[Path] = None
    env: Dict[str, str] = field(default_factory=dict)
    log_file: Optional[Path] = None

    def child_env(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Inherited process environment + command variables + ``extra``."""
        merged = dict(os.environ)
        merged.update(self.env)
        if extra:
            merged.update(extra)
        return merged


def launch(loader_env: LoaderEnvironment, command: LaunchCommand, runner: ProcessRunner) -> ProcessHandle:
    log.info("BepInEx found! Setting up environment...")
    variables = loader_env.launch_variables()
    for key, value in variables.items():
        log.debug("%s=%s", key, value)
    return runner.start(
        command.name,
        command.argv,
        cwd=command.cwd,
        log_file=command.log_file,
        env=command.child_env(variables),
    )


def launch_vanilla(command: LaunchCommand, runner: ProcessRunner) -> ProcessHandle:
    return runner.start(
        command.name,
        command.argv,
        cwd=command.cwd,
        log_file=command.log_file,
        env=command.child_env(),
    )
