"""Runtime configuration: env-driven defaults for the embed pipeline.

Reads from a .env file and BINEMBED_* environment variables.  Explicit
arguments passed to the encoder or materializer always win over these
defaults.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbedSettings(BaseSettings):
    """Defaults for encoding, rendering and materializing embedded binaries.

    Examples
    --------
    Override via environment::

        export BINEMBED_LOG_LEVEL=DEBUG
        export BINEMBED_COMPRESSION_LEVEL=6
        export BINEMBED_DEFAULT_BINARY_NAME=packer
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BINEMBED_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Encoder
    compression_level: int = Field(default=9, ge=1, le=9)
    default_binary_name: str = ""  # empty: use the source file's name

    # Renderer; purely cosmetic, the decoder ignores whitespace
    line_width: int = Field(default=76, ge=4)

    # Decoder / materializer
    chunk_size: int = Field(default=32 * 1024, gt=0)
    file_mode: int = 0o755  # octal in the environment: BINEMBED_FILE_MODE=755

    @field_validator("file_mode", mode="before")
    @classmethod
    def parse_octal_mode(cls, value: object) -> object:
        if isinstance(value, str):
            return int(value, 8)
        return value


# Module-level singleton: import as `from binembed.config import settings`
settings = EmbedSettings()
