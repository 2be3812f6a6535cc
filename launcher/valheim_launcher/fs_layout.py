from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from .settings import Settings

@dataclass(frozen=True)
class Layout:
    game_dir: Path
    bepinex_dir: Path
    plugins_dir: Path
    logs_dir: Path
    server_binary: Path

def build_layout(settings: Settings) -> Layout:
    game = settings.game_location
    bepinex = game / "BepInEx"
    return Layout(
        game_dir=game,
        bepinex_dir=bepinex,
        plugins_dir=bepinex / "plugins",
        logs_dir=game / "logs",
        server_binary=game / settings.server_executable,
    )

def ensure_dirs(layout: Layout) -> None:
    # only the logs dir; the BepInEx tree belongs to the loader install
    layout.logs_dir.mkdir(parents=True, exist_ok=True)
