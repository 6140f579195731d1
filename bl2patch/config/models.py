from __future__ import annotations

from typing import Any, Dict, Optional, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..steam.library import BORDERLANDS2_APP_ID


class _BaseConfigModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class MetadataConfig(_BaseConfigModel):
    version: Optional[str] = None
    description: Optional[str] = None


class SteamConfig(_BaseConfigModel):
    steam_path: Optional[str] = None
    app_id: int = BORDERLANDS2_APP_ID
    executable: str = "Binaries/Win32/Borderlands2.exe"


class PatcherSettings(_BaseConfigModel):
    chunk_size: int = Field(default=0x10000, gt=0)
    preflight_check: bool = True


class BackupConfig(_BaseConfigModel):
    enabled: bool = True
    local_dir: Optional[str] = None
    prefix: str = "bl2patch"


class LoggingConfig(_BaseConfigModel):
    level: str = "INFO"
    log_dir: Optional[str] = None
    json_output: bool = Field(default=False, alias="json")
    max_log_size: str = "10MB"
    backup_count: int = Field(default=3, ge=0)

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper().strip()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level


class ConfigModel(_BaseConfigModel):
    metadata: MetadataConfig = Field(default_factory=MetadataConfig, alias="_metadata")
    steam: SteamConfig = Field(default_factory=SteamConfig)
    patcher: PatcherSettings = Field(default_factory=PatcherSettings)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def validate_config(payload: Dict[str, Any]) -> ConfigModel:
    return cast(ConfigModel, ConfigModel.model_validate(payload))
