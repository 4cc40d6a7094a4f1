# Utils package
from .paths import (
    ensure_gamelog_dir,
    GAMELOG_DATA_DIR,
    GAMELOG_CONFIG_DIR,
    SETTINGS_PATH,
    TOKEN_JSON,
)
from .settings import load_settings, save_settings, get_api_base_url

__all__ = [
    'ensure_gamelog_dir',
    'GAMELOG_DATA_DIR',
    'GAMELOG_CONFIG_DIR',
    'SETTINGS_PATH',
    'TOKEN_JSON',
    'load_settings',
    'save_settings',
    'get_api_base_url',
]
