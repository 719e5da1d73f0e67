import json
import logging
import os

from batch_types import SortDirection

logger = logging.getLogger(__name__)

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "layergrid")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
CLIPBOARD_INTERFACE_COMMAND_DEFAULT = None
UNDO_MAX_DEPTH_DEFAULT = 50
DEFAULT_SORT_DIRECTION_DEFAULT = SortDirection.READING_ORDER


def ensure_config_dirs():
    try:
        os.makedirs(CONFIG_DIR, exist_ok=True)
    except OSError as exc:
        logger.debug("Could not create config dir %s: %s", CONFIG_DIR, exc)


def load_config():
    cfg = {
        "CLIPBOARD_INTERFACE_COMMAND": CLIPBOARD_INTERFACE_COMMAND_DEFAULT,
        "UNDO_MAX_DEPTH": UNDO_MAX_DEPTH_DEFAULT,
        "DEFAULT_SORT_DIRECTION": DEFAULT_SORT_DIRECTION_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config '%s': %s", CONFIG_JSON, exc)
        return cfg

    if not isinstance(data, dict):
        logger.warning("Config file '%s' is not a JSON object", CONFIG_JSON)
        return cfg

    clip_cmd = data.get("clipboard_interface_command")
    if isinstance(clip_cmd, list) and clip_cmd and all(isinstance(item, str) for item in clip_cmd):
        cfg["CLIPBOARD_INTERFACE_COMMAND"] = clip_cmd

    depth = data.get("undo_max_depth")
    if isinstance(depth, int) and not isinstance(depth, bool) and depth > 0:
        cfg["UNDO_MAX_DEPTH"] = depth

    direction = data.get("default_sort_direction")
    if isinstance(direction, str):
        try:
            cfg["DEFAULT_SORT_DIRECTION"] = SortDirection(direction)
        except ValueError:
            logger.warning("Unknown default_sort_direction %r in config", direction)

    return cfg
