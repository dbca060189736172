"""Configuration layer: pydantic-settings ``Settings`` and the YAML loader."""

from semsearch.config.loader import load_config
from semsearch.config.settings import Settings

__all__ = ["Settings", "load_config"]
