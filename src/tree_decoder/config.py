import logging
import sys

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tree_decoder.components.scanner import MAX_FILE_SIZE, MAX_LINE_LENGTH


class Settings(BaseSettings):
    """Decoder settings loaded from ``TREE_DECODER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TREE_DECODER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Input limits
    max_file_size: int = Field(default=MAX_FILE_SIZE, gt=0)
    max_line_length: int = Field(default=MAX_LINE_LENGTH, gt=0)

    # Decoding modes
    complete_tree: bool = True
    duplicate_ids: bool = False

    # Logging
    log_level: str = "WARNING"


settings = Settings()


def configure_logging(level: str | int) -> None:
    """Send log records to stderr at *level*, replacing existing handlers."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
