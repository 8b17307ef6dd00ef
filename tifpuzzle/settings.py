"""
Settings Module for TiFpuzzle

Provides persistent storage for user preferences using JSON.
Settings are stored in config.json in the working directory. Puzzle
progress is never stored here.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any

from tifpuzzle.engine.constants import DEFAULT_GRID_SIZE, SUPPORTED_GRID_SIZES

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "grid_size": DEFAULT_GRID_SIZE,
    "last_image_path": None,
}


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file to read

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        # Merge with defaults to handle missing keys
        result = DEFAULT_SETTINGS.copy()
        result.update(settings)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()

    if result.get("grid_size") not in SUPPORTED_GRID_SIZES:
        logger.warning(f"Invalid grid_size {result.get('grid_size')!r}, using {DEFAULT_GRID_SIZE}")
        result["grid_size"] = DEFAULT_GRID_SIZE

    logger.debug(f"Settings loaded: {result}")
    return result


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file to write
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
