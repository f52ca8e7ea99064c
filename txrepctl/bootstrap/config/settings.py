from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from txrep.core.helpers.utils import LOG_LEVELS
from txrepctl.bootstrap.config.loader import get_configfile


class RenderSettings(BaseModel):
    format: Annotated[
        Literal["yaml", "json"],
        Field(
            description="Output format of decoded transaction documents.",
            default="yaml"
        )
    ]


class EncodeSettings(BaseModel):
    annotate: Annotated[
        bool,
        Field(
            description=(
                "Append human readable annotations after values, e.g.\n"
                "'123400000 (12.34e7)' for amounts and an ISO-8601 UTC date for\n"
                "time bounds. Annotations are ignored when decoding."
            ),
            default=False
        )
    ]


class TxrepConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TXREP_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    log_level: Annotated[
        str,
        Field(
            description="Logging verbosity: DEBUG, INFO, WARNING, ERROR or CRITICAL.",
            default="WARNING"
        )
    ]

    render: Annotated[
        RenderSettings,
        Field(
            description="How decoded transactions are rendered.",
            default_factory=RenderSettings
        )
    ]

    encode: Annotated[
        EncodeSettings,
        Field(
            description="Serializer options.",
            default_factory=EncodeSettings
        )
    ]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        configfile = get_configfile()
        if configfile is None:
            return init_settings, env_settings
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=configfile),
        )
