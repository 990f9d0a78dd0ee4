import json
import stat

import pytest

from commitai.config import (
    DEFAULT_MODEL,
    Config,
    config_file_path,
    load_config,
    load_persisted_config,
    save_config,
)
from commitai.exceptions import ConfigError


def test_defaults_without_file():
    cfg = load_config()

    assert cfg.gemini_api_key == ""
    assert cfg.language == "en"
    assert cfg.commit_style == "conventional"
    assert cfg.max_tokens == 1024
    assert cfg.model == DEFAULT_MODEL


def test_env_key_overrides_file(monkeypatch):
    save_config(Config(gemini_api_key="from-file", language="pt-br"))
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")

    cfg = load_config()

    assert cfg.gemini_api_key == "from-env"
    assert cfg.language == "pt-br"


def test_model_env_override(monkeypatch):
    monkeypatch.setenv("COMMITAI_MODEL", "gemini-2.5-pro")
    assert load_config().model == "gemini-2.5-pro"


def test_overrides_take_precedence_and_skip_empty():
    save_config(Config(language="en", commit_style="conventional"))

    cfg = load_config(overrides={"language": "pt", "commit_style": None})

    assert cfg.language == "pt"
    assert cfg.commit_style == "conventional"


def test_unknown_override_rejected():
    with pytest.raises(ConfigError):
        load_config(overrides={"colour": "blue"})


def test_save_and_load_roundtrip():
    path = save_config(
        Config(gemini_api_key="abc", model="gemini-x", max_tokens=2048)
    )

    assert path == config_file_path()
    loaded = load_persisted_config()
    assert loaded == Config(gemini_api_key="abc", model="gemini-x", max_tokens=2048)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_save_never_writes_env_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret-from-env")
    cfg = load_config()

    path = save_config(cfg)

    data = json.loads(path.read_text())
    assert data["gemini_api_key"] == ""
    assert "secret-from-env" not in path.read_text()


def test_invalid_json_raises_config_error():
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text("{not json")

    with pytest.raises(ConfigError):
        load_config()


def test_unknown_keys_ignored():
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"language": "pt-br", "legacy": True}))

    assert load_config().language == "pt-br"


def test_validate_requires_key():
    with pytest.raises(ConfigError):
        Config().validate()
    Config(gemini_api_key="k").validate()


@pytest.mark.parametrize(
    "key,expected",
    [
        ("", "(not set)"),
        ("short", "****"),
        ("AIzaSyABCDEFGH1234", "AIza**********1234"),
    ],
)
def test_masked_api_key(key, expected):
    assert Config(gemini_api_key=key).masked_api_key() == expected
