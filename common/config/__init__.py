"""
Configuration module - environment-driven settings shared by the services.
"""

from common.config.base_settings import BaseAppSettings

__all__ = ["BaseAppSettings"]
