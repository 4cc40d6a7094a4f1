"""Settings loading for gamelog.

Settings live in ~/.local/share/gamelog/settings.json. Every key is optional;
a missing or unreadable file behaves like an empty one.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from .paths import SETTINGS_PATH

logger = logging.getLogger(__name__)

API_URL_ENV = "GAMELOG_API_URL"
DEFAULT_API_BASE_URL = "http://localhost:8000/api"


def load_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Load settings.json. Returns {} when absent or corrupt."""
    settings_path = path or SETTINGS_PATH
    try:
        if os.path.exists(settings_path):
            with open(settings_path, 'r') as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning(f"[Settings] Ignoring {settings_path}: top level is not an object")
    except Exception as e:
        logger.error(f"[Settings] Error loading settings from {settings_path}: {e}")
    return {}


def save_settings(settings: Dict[str, Any], path: Optional[str] = None) -> bool:
    """Save settings to file"""
    settings_path = path or SETTINGS_PATH
    try:
        os.makedirs(os.path.dirname(settings_path), exist_ok=True)
        with open(settings_path, 'w') as f:
            json.dump(settings, f, indent=2)
        return True
    except Exception as e:
        logger.error(f"[Settings] Error saving settings: {e}")
        return False


def get_api_base_url(settings: Optional[Dict[str, Any]] = None) -> str:
    """Resolve the REST API base URL.

    Precedence: GAMELOG_API_URL environment variable, then the
    'api_base_url' settings key, then DEFAULT_API_BASE_URL.
    """
    env_url = os.environ.get(API_URL_ENV)
    if env_url:
        return env_url.rstrip('/')

    if settings is None:
        settings = load_settings()
    saved_url = settings.get('api_base_url')
    if saved_url:
        return str(saved_url).rstrip('/')

    return DEFAULT_API_BASE_URL
