"""
Tests for the server start flow: modded vs. vanilla launch.
"""

from unittest.mock import patch

import pytest

from conftest import write_manifest
from valheim_launcher.orchestrator import Orchestrator
from valheim_launcher.settings import Settings


def make_settings(game, **kwargs):
    return Settings(game_location=game, **kwargs)


class TestServerCommand:

    def test_command_line(self, game_dir):
        orch = Orchestrator(make_settings(game_dir, name="My Server", world="Midgard", port=2500, public=False),
                            environ={})
        cmd = orch.server_command()

        assert cmd.argv == [
            str(game_dir / "valheim_server.x86_64"),
            "-nographics", "-batchmode",
            "-port", "2500",
            "-name", "My Server",
            "-world", "Midgard",
            "-public", "0",
        ]
        assert cmd.cwd == game_dir
        assert cmd.env == {"SteamAppId": "892970"}
        assert cmd.log_file == game_dir / "logs" / "valheim_server.log"

    def test_password_appended(self, game_dir):
        orch = Orchestrator(make_settings(game_dir, password="secret1"), environ={})
        assert orch.server_command().argv[-2:] == ["-password", "secret1"]


class TestStartServer:

    def test_modded_launch_when_installed(self, modded_game):
        orch = Orchestrator(make_settings(modded_game), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen") as popen:
            assert orch.start_server() == 0
        child_env = popen.call_args.kwargs["env"]
        assert child_env["DOORSTOP_ENABLE"] == "TRUE"
        assert child_env["DOORSTOP_INVOKE_DLL_PATH"] == str(modded_game / "BepInEx" / "core" / "BepInEx.Preloader.dll")

    def test_vanilla_launch_when_not_installed(self, game_dir, monkeypatch):
        monkeypatch.delenv("DOORSTOP_ENABLE", raising=False)
        orch = Orchestrator(make_settings(game_dir), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen") as popen:
            orch.start_server()
        assert "DOORSTOP_ENABLE" not in popen.call_args.kwargs["env"]

    def test_vanilla_flag_skips_loader(self, modded_game, monkeypatch):
        monkeypatch.delenv("DOORSTOP_ENABLE", raising=False)
        orch = Orchestrator(make_settings(modded_game), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen") as popen:
            orch.start_server(vanilla=True)
        assert "DOORSTOP_ENABLE" not in popen.call_args.kwargs["env"]

    def test_disabled_by_settings(self, modded_game, monkeypatch):
        monkeypatch.delenv("DOORSTOP_ENABLE", raising=False)
        orch = Orchestrator(make_settings(modded_game, disable_bepinex=True), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen") as popen:
            orch.start_server()
        assert "DOORSTOP_ENABLE" not in popen.call_args.kwargs["env"]

    def test_wait_returns_exit_code(self, game_dir):
        orch = Orchestrator(make_settings(game_dir), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen") as popen:
            popen.return_value.wait.return_value = 3
            assert orch.start_server(wait=True) == 3

    def test_spawn_error_reaches_caller(self, game_dir):
        orch = Orchestrator(make_settings(game_dir), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen", side_effect=PermissionError(13, "denied")):
            with pytest.raises(PermissionError):
                orch.start_server()

    def test_started_process_tracked(self, game_dir):
        orch = Orchestrator(make_settings(game_dir), environ={})
        with patch("valheim_launcher.process_runner.subprocess.Popen") as popen:
            popen.return_value.pid = 4242
            orch.start_server()
        assert [(h.name, h.proc.pid) for h in orch.runner.handles] == [("server", 4242)]

    def test_loader_env_built_once_per_launch(self, modded_game):
        orch = Orchestrator(make_settings(modded_game), environ={})
        with patch.object(orch, "build_loader_env", wraps=orch.build_loader_env) as build, \
             patch("valheim_launcher.process_runner.subprocess.Popen"):
            orch.start_server()
        assert build.call_count == 1


class TestLoaderStatus:

    def test_lists_mods(self, modded_game):
        write_manifest(modded_game / "BepInEx" / "plugins" / "AuthorX-SomeMod")
        orch = Orchestrator(make_settings(modded_game), environ={})
        status = orch.loader_status()
        assert status.enabled
        assert status.mods[0].name == "SomeMod"

    def test_disabled_by_settings(self, modded_game):
        orch = Orchestrator(make_settings(modded_game, disable_bepinex=True), environ={})
        assert orch.loader_status().model_dump() == {"enabled": False, "mods": []}

    def test_resolved_fresh_each_query(self, game_dir):
        orch = Orchestrator(make_settings(game_dir), environ={})
        assert orch.loader_status().enabled is False
        assert orch.loader_installed() is False

        core = game_dir / "BepInEx" / "core"
        core.mkdir(parents=True)
        (core / "BepInEx.Preloader.dll").write_bytes(b"")
        libs = game_dir / "doorstop_libs"
        libs.mkdir()
        (libs / "libdoorstop_x64.so").write_bytes(b"")

        assert orch.loader_status().enabled is True
        assert orch.loader_installed() is True


class TestPrepareEnvironment:

    def test_creates_logs_dir_only(self, game_dir):
        orch = Orchestrator(make_settings(game_dir), environ={})
        orch.prepare_environment()
        assert (game_dir / "logs").is_dir()
        assert not (game_dir / "BepInEx").exists()
