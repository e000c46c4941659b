"""Configuration module for dealerdesk."""

from dealerdesk.config.loader import get_config_path, load_config
from dealerdesk.config.schema import Config

__all__ = ["Config", "load_config", "get_config_path"]
