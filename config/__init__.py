"""
Configuration for the RLY converter: fixed tables (constants), runtime
settings (pydantic-settings, RLY_ environment prefix) and logging setup.
"""
from .constants import *
from .logging_config import setup_logger, get_logger, logger
from .settings import Settings, settings

__all__ = [
    'Settings',
    'settings',
    'setup_logger',
    'get_logger',
    'logger',
]
