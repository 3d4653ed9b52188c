"""Logging and configuration helpers."""
from .config_loader import ConfigLoader
from .logger import setup_logger

__all__ = ['ConfigLoader', 'setup_logger']
