"""Test configuration loading."""

import argparse

import pytest
from pydantic import ValidationError

from voicegrid.core.config_loader import get_nested, load_config, override_from_args, set_nested
from voicegrid.core.config_schema import default_config


@pytest.fixture(autouse=True)
def dev_env(monkeypatch):
    monkeypatch.setenv("VOICEGRID_ENV", "dev")
    monkeypatch.delenv("STRICT_CONFIG", raising=False)


def test_config_parses():
    """Test that base.yaml parses correctly."""
    cfg = load_config()
    assert isinstance(cfg, dict)
    assert "render" in cfg
    assert "voice" in cfg


def test_config_has_required_keys():
    """Test that config has all required top-level keys."""
    cfg = load_config()
    required_keys = ["logging", "render", "voice", "whisper", "mic", "feedback", "colors"]
    for key in required_keys:
        assert key in cfg, f"Missing required config key: {key}"


def test_dev_overlay_applied():
    cfg = load_config()
    assert cfg["logging"]["level"] == "DEBUG"
    assert cfg["feedback"]["message_duration"] == 2.5


def test_prod_overlay_expands_env(monkeypatch):
    monkeypatch.setenv("VOICEGRID_ENV", "prod")
    monkeypatch.setenv("WHISPER_SERVER_URL", "http://asr.local:9001")
    cfg = load_config()
    assert cfg["whisper"]["server_url"] == "http://asr.local:9001"
    assert cfg["render"]["fullscreen"] is True


def test_invalid_config_rejected(tmp_path):
    config_file = tmp_path / "base.yaml"
    config_file.write_text("mic:\n  aggressiveness: 7\n")
    with pytest.raises(ValidationError):
        load_config(config_file)


def test_validation_can_be_disabled(tmp_path, monkeypatch):
    monkeypatch.setenv("STRICT_CONFIG", "0")
    config_file = tmp_path / "base.yaml"
    config_file.write_text("mic:\n  aggressiveness: 7\n")
    assert load_config(config_file) == {"mic": {"aggressiveness": 7}}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_defaults_fill_missing_sections(tmp_path):
    config_file = tmp_path / "base.yaml"
    config_file.write_text("title: Test\n")
    cfg = load_config(config_file)
    assert cfg["title"] == "Test"
    assert cfg == {**default_config(), "title": "Test"}


def test_nested_helpers():
    cfg = {}
    set_nested(cfg, "render.resolution", [800, 600])
    assert get_nested(cfg, "render.resolution") == [800, 600]
    assert get_nested(cfg, "render.missing", default=1) == 1


class TestCliOverrides:
    def args(self, **kwargs):
        defaults = dict(
            fullscreen=False, resolution=None, display=None, console=False, script=None, log_level=None
        )
        defaults.update(kwargs)
        return argparse.Namespace(**defaults)

    def test_render_overrides(self):
        cfg = load_config()
        override_from_args(cfg, self.args(fullscreen=True, resolution="800x600", display=1))
        assert cfg["render"]["fullscreen"] is True
        assert cfg["render"]["resolution"] == [800, 600]
        assert cfg["render"]["display"] == 1

    def test_bad_resolution(self):
        with pytest.raises(ValueError):
            override_from_args({}, self.args(resolution="big"))

    @pytest.mark.parametrize("kwargs", [{"console": True}, {"script": "commands.txt"}])
    def test_console_source(self, kwargs):
        cfg = load_config()
        override_from_args(cfg, self.args(**kwargs))
        assert cfg["voice"]["source"] == "console"

    def test_log_level(self):
        cfg = {}
        override_from_args(cfg, self.args(log_level="warning"))
        assert cfg["logging"]["level"] == "WARNING"
