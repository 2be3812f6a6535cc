from __future__ import annotations
import os
from typing import Mapping, Optional
from .settings import Settings
from .logging_setup import get_logger
from .fs_layout import build_layout, ensure_dirs
from .env_resolver import PathProbe
from .loader_env import LoaderEnvironment
from .launch import LaunchCommand, launch, launch_vanilla
from .process_runner import ProcessHandle, ProcessRunner
from .status import LoaderStatus

log = get_logger("valheim.launcher.orch")

class Orchestrator:
    def __init__(self, settings: Settings, environ: Optional[Mapping[str, str]] = None,
                 exists: Optional[PathProbe] = None):
        self.settings = settings
        self.layout = build_layout(settings)
        self.runner = ProcessRunner()
        self.environ = os.environ if environ is None else environ
        self.exists = os.path.exists if exists is None else exists

    def build_loader_env(self) -> LoaderEnvironment:
        """Resolve the doorstop environment against the current disk and environment."""
        return LoaderEnvironment.build(
            self.layout.game_dir,
            self.layout.bepinex_dir,
            environ=self.environ,
            exists=self.exists,
        )

    def prepare_environment(self) -> None:
        ensure_dirs(self.layout)
        if not self.layout.server_binary.exists():
            log.warning("Valheim server binary not found at %s.", self.layout.server_binary)

    def loader_installed(self, env: Optional[LoaderEnvironment] = None) -> bool:
        if self.settings.disable_bepinex:
            return False
        env = env or self.build_loader_env()
        return env.is_installed(self.exists)

    def loader_status(self) -> LoaderStatus:
        if self.settings.disable_bepinex:
            return LoaderStatus.disabled()
        return LoaderStatus.collect(self.build_loader_env(), self.layout.plugins_dir, self.exists)

    def server_command(self) -> LaunchCommand:
        s = self.settings
        argv = [
            str(self.layout.server_binary),
            "-nographics",
            "-batchmode",
            "-port", str(s.port),
            "-name", s.name,
            "-world", s.world,
            "-public", "1" if s.public else "0",
        ]
        if s.password:
            argv += ["-password", s.password]
        return LaunchCommand(
            name="server",
            argv=argv,
            cwd=self.layout.game_dir,
            env={"SteamAppId": str(s.steam_app_id)},
            log_file=self.layout.logs_dir / "valheim_server.log",
        )

    def start_server(self, *, vanilla: bool = False, wait: bool = False) -> int:
        cmd = self.server_command()
        log.info("Launching Valheim server: name=%s world=%s port=%s public=%s",
                 self.settings.name, self.settings.world, self.settings.port, self.settings.public)

        handle: ProcessHandle
        env = None if vanilla else self.build_loader_env()
        if env is not None and self.loader_installed(env):
            handle = launch(env, cmd, self.runner)
        else:
            if vanilla or self.settings.disable_bepinex:
                log.info("BepInEx disabled, launching a vanilla instance.")
            else:
                log.info("We didn't find a modded instance! Launching a normal instance!")
            handle = launch_vanilla(cmd, self.runner)
        log.info("Server started (pid=%s)", handle.proc.pid)

        if not wait:
            return 0
        rc = handle.proc.wait()
        log.info("Server exited with rc=%s", rc)
        return int(rc if rc is not None else 0)
