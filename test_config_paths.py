import json
import tempfile
from pathlib import Path

import config_paths


def _with_config_dir(tmp, body):
    cfg_dir = Path(tmp) / "callsh"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    orig_dir = config_paths.CONFIG_DIR
    orig_json = config_paths.CONFIG_JSON
    try:
        config_paths.CONFIG_DIR = str(cfg_dir)
        config_paths.CONFIG_JSON = str(cfg_dir / "config.json")
        if body is not None:
            (cfg_dir / "config.json").write_text(body)
        return config_paths.load_config()
    finally:
        config_paths.CONFIG_DIR = orig_dir
        config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg = _with_config_dir(tmp, None)
        assert cfg["PROMPT"] == "❯ "
        assert cfg["WELCOME"] == "Welcome !"
        assert cfg["POLL_TIMEOUT_MS"] == 100
        assert cfg["HISTORY_SIZE"] == 100
        assert cfg["PAUSE_AFTER_PASSTHROUGH"] is True


def test_load_config_reads_json_overrides():
    with tempfile.TemporaryDirectory() as tmp:
        cfg = _with_config_dir(
            tmp,
            json.dumps(
                {
                    "prompt": "$ ",
                    "welcome": "",
                    "poll_timeout_ms": 50,
                    "history_size": 500,
                    "pause_after_passthrough": False,
                }
            ),
        )
        assert cfg["PROMPT"] == "$ "
        assert cfg["WELCOME"] == ""
        assert cfg["POLL_TIMEOUT_MS"] == 50
        assert cfg["HISTORY_SIZE"] == 500
        assert cfg["PAUSE_AFTER_PASSTHROUGH"] is False


def test_load_config_ignores_invalid_values():
    with tempfile.TemporaryDirectory() as tmp:
        cfg = _with_config_dir(
            tmp,
            json.dumps(
                {
                    "prompt": 3,
                    "poll_timeout_ms": 0,
                    "history_size": True,
                    "pause_after_passthrough": "no",
                }
            ),
        )
        assert cfg["PROMPT"] == "❯ "
        assert cfg["POLL_TIMEOUT_MS"] == 100
        assert cfg["HISTORY_SIZE"] == 100
        assert cfg["PAUSE_AFTER_PASSTHROUGH"] is True


def test_load_config_survives_broken_json():
    with tempfile.TemporaryDirectory() as tmp:
        cfg = _with_config_dir(tmp, "{not json")
        assert cfg["PROMPT"] == "❯ "


def test_config_paths_live_under_config_dir():
    assert config_paths.INIT_SCRIPT.startswith(config_paths.CONFIG_DIR)
    assert config_paths.INIT_SCRIPT.endswith("init.py")
    assert config_paths.HISTORY_PATH.startswith(config_paths.CONFIG_DIR)
