"""
Configuration module for the trip budget core.
"""
from .settings import TripBudgetConfig, get_config, load_config, reload_config

__all__ = ["TripBudgetConfig", "get_config", "load_config", "reload_config"]
