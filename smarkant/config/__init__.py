"""Configuration module for smarkant."""

from smarkant.config.loader import get_config_path, load_config
from smarkant.config.schema import Config, ServerConfig, ShadowConfig, SkillConfig

__all__ = [
    "Config",
    "ServerConfig",
    "ShadowConfig",
    "SkillConfig",
    "load_config",
    "get_config_path",
]
