"""
Civic Triage core: configuration and logging
"""

from .config import Config, get_config
from .logger import get_logger

# Export main components
__all__ = [
    "Config",
    "get_config",
    "get_logger",
]
