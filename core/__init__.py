"""
==============================================
Core infrastructure package for the SQL builder.
==============================================

This package provides centralized configuration management and logging
infrastructure used by the statement builder.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Stamping column {config.updated_column}")
"""

__version__ = "0.1.0"
__all__ = ['get_logger', 'setup_logging', 'config', 'Config', 'BuilderConfig']

from core.config import BuilderConfig, Config, config
from core.logger import get_logger, setup_logging
