"""
==============================================
Configuration management for the SQL builder.
==============================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration system ensures:
- Single source of truth for statement-rendering settings
- Type conversion of environment values
- Per-environment overrides through .env files

Example:
    >>> from core.config import config
    >>>
    >>> # Column names stamped by INSERT/UPDATE renderers
    >>> print(config.created_column, config.updated_column)
    >>>
    >>> # Timestamp format used for stamps and datetime literals
    >>> print(config.timestamp_format)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class BuilderConfig:
    """Statement builder settings.

    Attributes:
        created_column: Column stamped with the creation time on INSERT
        updated_column: Column stamped with the modification time on INSERT/UPDATE
        timestamp_format: strftime format for stamps and datetime literals
    """

    created_column: str = 'createdAt'
    updated_column: str = 'updatedAt'
    timestamp_format: str = '%Y-%m-%d %H:%M:%S'


@dataclass
class LoggingConfig:
    """Logging settings.

    Attributes:
        level: Default logging level name
        log_file: Optional log file name (None disables file output)
    """

    level: str = 'INFO'
    log_file: Optional[str] = None


class Config:
    """Centralized configuration manager.

    Provides access to all configuration settings loaded from environment
    variables (.env file).

    Attributes:
        builder: BuilderConfig instance with rendering settings
        logging: LoggingConfig instance with logging settings

    Example:
        >>> config = Config()
        >>> print(f"Stamping {config.created_column}/{config.updated_column}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.builder = BuilderConfig(
            created_column=os.getenv('QUERY_CREATED_COLUMN', 'createdAt'),
            updated_column=os.getenv('QUERY_UPDATED_COLUMN', 'updatedAt'),
            timestamp_format=os.getenv('QUERY_TIMESTAMP_FORMAT', '%Y-%m-%d %H:%M:%S')
        )

        self.logging = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO'),
            log_file=os.getenv('LOG_FILE') or None
        )

    @property
    def created_column(self) -> str:
        """Get the creation timestamp column name."""
        return self.builder.created_column

    @property
    def updated_column(self) -> str:
        """Get the modification timestamp column name."""
        return self.builder.updated_column

    @property
    def timestamp_format(self) -> str:
        """Get the timestamp strftime format."""
        return self.builder.timestamp_format

    @property
    def log_level(self) -> str:
        """Get the default logging level."""
        return self.logging.level

    @property
    def log_file(self) -> Optional[str]:
        """Get the optional log file name."""
        return self.logging.log_file


# Global configuration instance
config = Config()
