"""
Utility modules for the checkout server
"""
from .config_loader import PlatformConfig, load_platform_config

__all__ = [
    'PlatformConfig',
    'load_platform_config',
]
