"""
config.py - Configuration for the data table engine
"""
import os
from typing import Optional
from dataclasses import dataclass


@dataclass
class DataTableConfig:
    """Configuration for the data table engine"""

    # Normalization
    keep_primitive_value: bool = False

    # Tree mode
    max_tree_depth: int = 64

    # Grouped tables
    enable_rowspan_hover: bool = True
    highlight_color: str = "#fafcfc"

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"

    def from_env(self) -> 'DataTableConfig':
        """Load configuration from environment variables"""
        config = DataTableConfig()

        config.keep_primitive_value = _env_bool('DATATABLE_KEEP_PRIMITIVE_VALUE', config.keep_primitive_value)
        config.max_tree_depth = int(os.getenv('DATATABLE_MAX_TREE_DEPTH', str(config.max_tree_depth)))

        config.enable_rowspan_hover = _env_bool('DATATABLE_ENABLE_ROWSPAN_HOVER', config.enable_rowspan_hover)
        config.highlight_color = os.getenv('DATATABLE_HIGHLIGHT_COLOR', config.highlight_color)

        config.api_host = os.getenv('DATATABLE_API_HOST', config.api_host)
        config.api_port = int(os.getenv('DATATABLE_API_PORT', str(config.api_port)))

        config.log_level = os.getenv('DATATABLE_LOG_LEVEL', config.log_level).upper()

        return config

    def validate(self) -> None:
        """Validate configuration settings"""
        errors = []

        if self.max_tree_depth <= 0:
            errors.append("max_tree_depth must be positive")

        if not 0 < self.api_port < 65536:
            errors.append("api_port must be between 1 and 65535")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"log_level {self.log_level!r} is not a logging level")

        if errors:
            raise ValueError(f"Configuration validation errors: {'; '.join(errors)}")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Manager for configuration loading and validation"""

    def __init__(self):
        self.config: Optional[DataTableConfig] = None

    def load_config(self, config_source: Optional[str] = None) -> DataTableConfig:
        """Load configuration from various sources"""
        if config_source == 'env':
            self.config = DataTableConfig().from_env()
        else:
            self.config = DataTableConfig()

        self.config.validate()
        return self.config

    def get_config(self) -> DataTableConfig:
        """Get the loaded configuration"""
        if self.config is None:
            self.config = self.load_config()
        return self.config


# Global configuration manager
config_manager = ConfigManager()


def get_config() -> DataTableConfig:
    """Get the global configuration"""
    return config_manager.get_config()
