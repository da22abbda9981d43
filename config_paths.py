import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "callsh")
INIT_SCRIPT = os.path.join(CONFIG_DIR, "init.py")
HISTORY_PATH = os.path.join(CONFIG_DIR, "history.log")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "callsh.log")

# default settings
PROMPT_DEFAULT = "❯ "
WELCOME_DEFAULT = "Welcome !"
POLL_TIMEOUT_MS_DEFAULT = 100
HISTORY_SIZE_DEFAULT = 100
PAUSE_AFTER_PASSTHROUGH_DEFAULT = True


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)
    if not os.path.exists(HISTORY_PATH):
        try:
            with open(HISTORY_PATH, "w", encoding="utf-8") as f:
                f.write("")
        except OSError:
            pass


def _positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def load_config():
    cfg = {
        "PROMPT": PROMPT_DEFAULT,
        "WELCOME": WELCOME_DEFAULT,
        "POLL_TIMEOUT_MS": POLL_TIMEOUT_MS_DEFAULT,
        "HISTORY_SIZE": HISTORY_SIZE_DEFAULT,
        "PAUSE_AFTER_PASSTHROUGH": PAUSE_AFTER_PASSTHROUGH_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    prompt = data.get("prompt")
    if isinstance(prompt, str):
        cfg["PROMPT"] = prompt
    welcome = data.get("welcome")
    if isinstance(welcome, str):
        cfg["WELCOME"] = welcome
    timeout = data.get("poll_timeout_ms")
    if _positive_int(timeout):
        cfg["POLL_TIMEOUT_MS"] = timeout
    size = data.get("history_size")
    if _positive_int(size):
        cfg["HISTORY_SIZE"] = size
    pause = data.get("pause_after_passthrough")
    if isinstance(pause, bool):
        cfg["PAUSE_AFTER_PASSTHROUGH"] = pause

    return cfg
