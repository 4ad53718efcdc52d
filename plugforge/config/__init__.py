"""Configuration module for plugforge."""

from plugforge.config.loader import get_config_path, load_config
from plugforge.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
