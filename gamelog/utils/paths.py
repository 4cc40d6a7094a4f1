"""gamelog file path constants."""

import os


# gamelog data directory
GAMELOG_DATA_DIR = os.path.expanduser("~/.local/share/gamelog")

# gamelog config directory (credentials live here, not in data dir)
GAMELOG_CONFIG_DIR = os.path.expanduser("~/.config/gamelog")

SETTINGS_PATH = os.path.join(GAMELOG_DATA_DIR, "settings.json")
TOKEN_JSON = os.path.join(GAMELOG_CONFIG_DIR, "tokens.json")


def ensure_gamelog_dir() -> None:
    """Ensure the gamelog data directory exists."""
    os.makedirs(GAMELOG_DATA_DIR, exist_ok=True)
