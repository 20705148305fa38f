"""Tests for the local config file and logger helpers."""

import json
import logging

import utils


def test_load_app_config_creates_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(utils.URL_ENV_VAR, raising=False)
    path = tmp_path / "cfg" / "study_log_config.json"

    cfg = utils.load_app_config(str(path))

    assert cfg == utils.DEFAULT_CONFIG
    assert json.loads(path.read_text(encoding="utf-8")) == utils.DEFAULT_CONFIG


def test_save_then_load_round_trip(tmp_path, monkeypatch):
    monkeypatch.delenv(utils.URL_ENV_VAR, raising=False)
    path = str(tmp_path / "study_log_config.json")
    cfg = dict(utils.DEFAULT_CONFIG, web_app_url="https://example.com/exec", request_timeout=10)

    assert utils.save_app_config(cfg, path) is True
    assert utils.load_app_config(path)["web_app_url"] == "https://example.com/exec"
    assert utils.load_app_config(path)["request_timeout"] == 10


def test_broken_config_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(utils.URL_ENV_VAR, raising=False)
    path = tmp_path / "study_log_config.json"
    path.write_text("{not json", encoding="utf-8")

    assert utils.load_app_config(str(path)) == utils.DEFAULT_CONFIG


def test_unknown_keys_are_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv(utils.URL_ENV_VAR, raising=False)
    path = tmp_path / "study_log_config.json"
    path.write_text(json.dumps({"gcal_enabled": True, "log_level": "DEBUG"}), encoding="utf-8")

    cfg = utils.load_app_config(str(path))

    assert "gcal_enabled" not in cfg
    assert cfg["log_level"] == "DEBUG"


def test_env_var_overrides_url(tmp_path, monkeypatch):
    monkeypatch.setenv(utils.URL_ENV_VAR, "https://env.example.com/exec")

    cfg = utils.load_app_config(str(tmp_path / "study_log_config.json"))

    assert cfg["web_app_url"] == "https://env.example.com/exec"


def test_configure_logging_attaches_single_handler():
    utils.configure_logging("DEBUG")
    utils.configure_logging("WARNING")

    root = logging.getLogger("study_log")
    assert len(root.handlers) == 1
    assert root.level == logging.WARNING
    assert utils.get_logger("remote").name == "study_log.remote"
