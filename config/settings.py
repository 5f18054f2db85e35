"""
Settings Manager for the Technician Assignment Engine
Handles configuration loading, validation, and environment variable management
"""

import os
import sys
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass
import logging
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Get the root directory of the project
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "config.yaml"

ROSTER_ORDERS = ('employee_id', 'input')

logger = logging.getLogger(__name__)


@dataclass
class AssignmentConfig:
    """Batch assignment service settings"""
    roster_order: str = "employee_id"  # 'employee_id' or 'input'
    reject_concurrent_runs: bool = True


@dataclass
class AnalyticsConfig:
    """Reporting thresholds"""
    high_quality_threshold: float = 85.0
    optimal_utilization_percent: float = 85.0


class Settings:
    """
    Central configuration management class
    Singleton pattern to ensure single instance across application
    """

    _instance = None
    _initialized = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize settings from configuration file"""
        if not self._initialized:
            self.config_file = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
            self._config = {}
            self._load_config()
            self._override_with_env()
            self._validate_config()
            self._setup_logging()
            self._initialized = True

    def _load_config(self):
        """Load configuration from YAML file"""
        try:
            with open(self.config_file, 'r') as f:
                self._config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            self._config = self._get_default_config()
            logger.warning(f"Configuration file not found: {self.config_file}, using defaults")
            return
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing configuration file {self.config_file}: {e}") from e

        # Fill any sections the file leaves out
        for section, values in self._get_default_config().items():
            if isinstance(values, dict):
                merged = dict(values)
                merged.update(self._config.get(section) or {})
                self._config[section] = merged
            else:
                self._config.setdefault(section, values)

    def _get_default_config(self) -> Dict[str, Any]:
        """Return default configuration if config file not found"""
        return {
            'system': {
                'project_name': 'Technician Assignment Engine',
                'version': '1.0.0',
                'log_level': 'INFO',
            },
            'paths': {
                'logs': './logs',
            },
            'logging': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'file': {
                    'enabled': False,
                    'name': 'assignment_engine.log',
                },
            },
            'assignment': {
                'roster_order': 'employee_id',
                'reject_concurrent_runs': True,
            },
            'analytics': {
                'high_quality_threshold': 85,
                'optimal_utilization_percent': 85,
            },
        }

    def _override_with_env(self):
        """Override configuration with environment variables"""

        if 'LOG_LEVEL' in os.environ:
            self.set('system.log_level', os.getenv('LOG_LEVEL').upper())

        if 'ASSIGNMENT_ROSTER_ORDER' in os.environ:
            self.set('assignment.roster_order', os.getenv('ASSIGNMENT_ROSTER_ORDER'))

        if 'ASSIGNMENT_REJECT_CONCURRENT_RUNS' in os.environ:
            self.set(
                'assignment.reject_concurrent_runs',
                os.getenv('ASSIGNMENT_REJECT_CONCURRENT_RUNS', 'true').lower() == 'true'
            )

    def _validate_config(self):
        """Validate configuration values"""
        if self.get('assignment.roster_order') not in ROSTER_ORDERS:
            raise ValueError(f"assignment.roster_order must be one of {ROSTER_ORDERS}")

        for key in ('analytics.high_quality_threshold', 'analytics.optimal_utilization_percent'):
            value = self.get(key)
            if not isinstance(value, (int, float)) or not 0 <= value <= 100:
                raise ValueError(f"{key} must be between 0 and 100")

        if not isinstance(getattr(logging, str(self.get('system.log_level', 'INFO')), None), int):
            raise ValueError(f"Unknown log level: {self.get('system.log_level')}")

    def _setup_logging(self):
        """Setup logging configuration"""
        log_level = self.get('system.log_level', 'INFO')
        log_format = self.get('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

        handlers = [logging.StreamHandler(sys.stdout)]
        if self.get('logging.file.enabled', False):
            log_dir = Path(self.get('paths.logs', './logs'))
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_dir / self.get('logging.file.name', 'assignment_engine.log')))

        logging.basicConfig(
            level=getattr(logging, log_level),
            format=log_format,
            handlers=handlers
        )

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation
        Example: settings.get('analytics.high_quality_threshold')
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
        Example: settings.set('assignment.roster_order', 'input')
        """
        keys = key.split('.')
        config = self._config

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_assignment_config(self) -> AssignmentConfig:
        """Get assignment service configuration object"""
        assignment_config = self.get('assignment', {})
        return AssignmentConfig(
            roster_order=assignment_config.get('roster_order', 'employee_id'),
            reject_concurrent_runs=assignment_config.get('reject_concurrent_runs', True)
        )

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get analytics configuration object"""
        analytics_config = self.get('analytics', {})
        return AnalyticsConfig(
            high_quality_threshold=float(analytics_config.get('high_quality_threshold', 85)),
            optimal_utilization_percent=float(analytics_config.get('optimal_utilization_percent', 85))
        )

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
