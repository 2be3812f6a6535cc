from __future__ import annotations
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    game_location: Path = Field(default=Path("/home/steam/valheim"), alias="GAME_LOCATION")
    server_executable: str = Field(default="valheim_server.x86_64", alias="SERVER_EXECUTABLE")

    name: str = Field(default="Valheim Docker", alias="NAME")
    port: int = Field(default=2456, alias="PORT")
    world: str = Field(default="Dedicated", alias="WORLD")
    password: str = Field(default="", alias="PASSWORD")
    public: bool = Field(default=True, alias="PUBLIC")

    disable_bepinex: bool = Field(default=False, alias="DISABLE_BEPINEX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    steam_app_id: int = Field(default=892970)

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)
