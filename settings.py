import logging
from typing import Annotated, FrozenSet, Tuple, Type

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def split_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6addr]:port``) into its parts."""
    host, sep, port = address.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"bind address must look like host:port, got {address!r}")
    return host.strip("[]"), int(port)


class Settings(BaseSettings):
    """Service configuration, read once at startup.

    Values come from ``RESTARTER_*`` environment variables, falling back to an
    optional ``config.toml`` in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESTARTER_",
        toml_file="config.toml",
        extra="ignore",
        frozen=True,
    )

    bearer_token: str = Field(min_length=1)
    storage_class: Annotated[FrozenSet[str], NoDecode]
    bind_address: str = "0.0.0.0:3000"
    dry_run: bool = False
    delete_uncontrolled: bool = False
    log_level: str = "INFO"
    request_timeout: float = Field(30.0, gt=0)
    delete_workers: int = Field(4, ge=1)
    running_only: bool = True

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))

    @field_validator("storage_class", mode="before")
    @classmethod
    def split_storage_classes(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        return [name.strip() for name in value if name and name.strip()]

    @field_validator("storage_class")
    @classmethod
    def require_storage_class(cls, value):
        if not value:
            raise ValueError("at least one storage class is required")
        return value

    @field_validator("bind_address")
    @classmethod
    def check_bind_address(cls, value):
        split_address(value)
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value):
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    @property
    def host(self) -> str:
        return split_address(self.bind_address)[0]

    @property
    def port(self) -> int:
        return split_address(self.bind_address)[1]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
