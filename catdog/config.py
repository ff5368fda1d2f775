"""
Runtime settings, read from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MODEL_ASSET = "models/cat_dog_lite_traced.ptl"
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "catdog"


@dataclass(frozen=True)
class Settings:
    model_asset: Path
    cache_dir: Path
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        model_asset=Path(os.getenv("CATDOG_MODEL_ASSET", DEFAULT_MODEL_ASSET)),
        cache_dir=Path(os.getenv("CATDOG_CACHE_DIR", str(DEFAULT_CACHE_DIR))).expanduser(),
        log_level=os.getenv("CATDOG_LOG_LEVEL", "INFO").upper(),
    )
