"""
Settings Manager for the Equipment Maintenance Prioritization System
Handles configuration loading, validation, and environment variable management
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union
from dataclasses import dataclass
import logging
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Get the root directory of the project
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "config.yaml"

logger = logging.getLogger(__name__)


@dataclass
class IngestionConfig:
    """Workbook ingestion settings"""
    open_orders_sheet: str = "Ordens Abertas"
    closed_orders_sheet: str = "Ordens Encerradas"
    default_location: str = "Not informed"

    @property
    def sheet_names(self) -> Dict[str, str]:
        """Logical source name -> workbook sheet name"""
        return {
            'open_orders': self.open_orders_sheet,
            'closed_orders': self.closed_orders_sheet,
        }


@dataclass
class ExportConfig:
    """Ranking export settings"""
    sheet_name: str = "Priority Ranking"
    file_prefix: str = "equipment_priority"
    output_dir: str = "./data/output"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'sheet_name': self.sheet_name,
            'file_prefix': self.file_prefix,
            'output_dir': self.output_dir,
        }


class Settings:
    """
    Central configuration management class
    Singleton pattern to ensure single instance across application
    """

    _instance = None
    _initialized = False

    def __new__(cls, config_file: Optional[Union[str, Path]] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize settings from configuration file

        Passing a different ``config_file`` to an already initialized
        instance switches the singleton over to that file.
        """
        requested = Path(config_file) if config_file else None
        if not self._initialized or (requested is not None and requested != self.config_file):
            self.config_file = requested or DEFAULT_CONFIG_FILE
            self._config = {}
            self._load_config()
            self._override_with_env()
            self._validate_config()
            self._initialized = True

    def _load_config(self):
        """Load configuration from YAML file"""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Configuration loaded from {self.config_file}")
        except FileNotFoundError:
            logger.warning(f"Configuration file not found: {self.config_file}, using defaults")
            self._config = self._get_default_config()
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing configuration file {self.config_file}: {e}") from e

    def _get_default_config(self) -> Dict[str, Any]:
        """Return default configuration if config file not found"""
        return {
            'environment': 'development',
            'paths': {
                'output': './data/output',
            },
            'ingestion': {
                'sheets': {
                    'open_orders': 'Ordens Abertas',
                    'closed_orders': 'Ordens Encerradas',
                },
                'default_location': 'Not informed',
            },
            'export': {
                'sheet_name': 'Priority Ranking',
                'file_prefix': 'equipment_priority',
            },
            'logging': {
                'level': 'INFO',
                'enable_console': True,
                'enable_file': False,
                'file': {
                    'path': 'logs/prioritization.log',
                    'max_bytes': 10485760,
                    'backup_count': 5,
                },
            },
        }

    def _override_with_env(self):
        """Override configuration with environment variables"""
        self._config['environment'] = os.getenv('ENVIRONMENT', self._config.get('environment', 'development'))

        if 'LOG_LEVEL' in os.environ:
            self.set('logging.level', os.getenv('LOG_LEVEL').upper())

        if 'PRIORITIZATION_OUTPUT_DIR' in os.environ:
            self.set('paths.output', os.getenv('PRIORITIZATION_OUTPUT_DIR'))

    def _validate_config(self):
        """Validate configuration values"""
        level = str(self.get('logging.level', 'INFO')).upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid logging level: {level}")

        sheets = self.get('ingestion.sheets', {}) or {}
        for source in ('open_orders', 'closed_orders'):
            name = sheets.get(source)
            if name is not None and not str(name).strip():
                raise ValueError(f"Sheet name for '{source}' must not be empty")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation
        Example: settings.get('ingestion.sheets.closed_orders')
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default

    def set(self, key: str, value: Any):
        """
        Set configuration value using dot notation
        Example: settings.set('logging.level', 'DEBUG')
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_ingestion_config(self) -> IngestionConfig:
        """Get workbook ingestion configuration object"""
        sheets = self.get('ingestion.sheets', {})
        return IngestionConfig(
            open_orders_sheet=sheets.get('open_orders', 'Ordens Abertas'),
            closed_orders_sheet=sheets.get('closed_orders', 'Ordens Encerradas'),
            default_location=self.get('ingestion.default_location', 'Not informed'),
        )

    def get_export_config(self) -> ExportConfig:
        """Get ranking export configuration object"""
        export_config = self.get('export', {})
        return ExportConfig(
            sheet_name=export_config.get('sheet_name', 'Priority Ranking'),
            file_prefix=export_config.get('file_prefix', 'equipment_priority'),
            output_dir=self.get('paths.output', './data/output'),
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self._config.get('environment', 'development') == 'development'

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self._config.get('environment', 'development') == 'production'

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary"""
        return self._config.copy()

    def save(self, file_path: Optional[Path] = None):
        """Save current configuration to file"""
        save_path = file_path or self.config_file
        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        logger.info(f"Configuration saved to {save_path}")

    def reload(self):
        """Reload configuration from file"""
        self._initialized = False
        self.__init__(self.config_file)
        logger.info("Configuration reloaded")


# Global settings instance
settings = Settings()


# Convenience functions for quick access
def get_config(key: str, default: Any = None) -> Any:
    """Quick access to configuration values"""
    return settings.get(key, default)
