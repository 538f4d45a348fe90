from typing import Optional, Dict, Any
import os
from dotenv import load_dotenv
import logging

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = 'America/Los_Angeles'


class ConfigManager:
    """Manage application configuration and environment variables"""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize config manager"""
        if env_file:
            self.env_file = env_file
        else:
            # Project root sits above src/timeblock/config
            project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
            self.env_file = os.path.join(project_root, '.env')
        logger.debug(f"Looking for .env file at: {self.env_file}")

        self.config: Dict[str, Any] = {}
        self.load_config()

    def load_config(self):
        """Load configuration from environment and .env file"""
        if os.path.exists(self.env_file):
            logger.info(f"Loading environment variables from {self.env_file}")
            load_dotenv(self.env_file, override=True)

        self.config['app'] = self._load_app_config()
        self.config['undo'] = self._load_undo_config()
        self.config['drag'] = self._load_drag_config()
        self.config['viewport'] = self._load_viewport_config()
        self.config['development'] = self._load_dev_config()

    def _load_app_config(self) -> Dict[str, Any]:
        """Load application settings"""
        return {
            'timezone': os.getenv('TIMEZONE', DEFAULT_TIMEZONE),
        }

    def _load_undo_config(self) -> Dict[str, Any]:
        """Load undo affordance settings"""
        return {
            'window_seconds': self._parse_float(os.getenv('UNDO_WINDOW_SECONDS'), 5.0),
        }

    def _load_drag_config(self) -> Dict[str, Any]:
        """Load drag hardening settings"""
        return {
            'timeout_seconds': self._parse_float(os.getenv('DRAG_TIMEOUT_SECONDS'), 30.0),
        }

    def _load_viewport_config(self) -> Dict[str, Any]:
        """Load the viewport used when the CLI simulates pointer input"""
        return {
            'width': int(self._parse_float(os.getenv('VIEWPORT_WIDTH'), 390)),
            'height': int(self._parse_float(os.getenv('VIEWPORT_HEIGHT'), 844)),
        }

    def _load_dev_config(self) -> Dict[str, Any]:
        """Load development settings"""
        return {
            'debug': self._parse_bool(os.getenv('DEBUG', 'false')),
            'log_level': os.getenv('LOG_LEVEL', 'INFO').upper(),
        }

    def _parse_bool(self, value: str) -> bool:
        """Parse string boolean value"""
        return str(value).lower() in ('true', '1', 'yes', 'on')

    def _parse_float(self, value: Optional[str], default: float) -> float:
        """Parse a numeric setting, falling back to the default when unset or invalid"""
        if value is None or not value.strip():
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Ignoring invalid numeric setting {value!r}, using {default}")
            return default

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value"""
        parts = key.split('.')
        value = self.config
        for part in parts:
            if isinstance(value, dict):
                value = value.get(part)
            else:
                return default
        return value if value is not None else default
