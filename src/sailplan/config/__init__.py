"""
Configuration helpers for the sail-plan advisor.
"""

from ..errors import ConfigError
from .models import AdvisorConfig, VesselConfig, load_config
from .settings import Secrets, get_secrets

__all__ = ["AdvisorConfig", "VesselConfig", "ConfigError", "load_config", "Secrets", "get_secrets"]
