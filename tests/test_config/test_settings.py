"""Tests for application settings and token configuration loading."""

import json
import os
from pathlib import Path
from unittest.mock import patch
import pytest
from pydantic import ValidationError
from nbtoken.config.settings import (
    App,
    config_load,
    config_merge,
    defaults_read,
    defaultsFile_resolve,
)
from nbtoken.models.dataModel import TokenConfig


def setup_function():
    for k in list(os.environ):
        if k.startswith("NBT_"):
            del os.environ[k]


def teardown_function():
    for k in list(os.environ):
        if k.startswith("NBT_"):
            del os.environ[k]


@pytest.fixture
def no_user_tokens(tmp_path: Path):
    with patch("nbtoken.config.settings.TOKENS_FILE", tmp_path / "absent.json"):
        yield


def test_app_default_settings():
    app = App()
    assert app.beQuiet is False
    assert app.delimiter == ":"
    assert app.defaults_file is None


def test_app_env_override(tmp_path: Path):
    os.environ["NBT_BEQUIET"] = "true"
    os.environ["NBT_DELIMITER"] = "."
    os.environ["NBT_DEFAULTS_FILE"] = str(tmp_path / "tokens.json")

    app = App()
    assert app.beQuiet is True
    assert app.delimiter == "."
    assert app.defaults_file == tmp_path / "tokens.json"


def test_token_config_defaults():
    config = TokenConfig()
    assert config.delimiter == ":"
    assert config.defaults == {"site": {"name": None, "slogan": None}}


def test_token_config_rejects_empty_delimiter():
    with pytest.raises(ValidationError):
        TokenConfig(delimiter="")


def test_config_merge_deep():
    config = TokenConfig()
    merged = config_merge(
        config, {"defaults": {"site": {"name": "Acme"}, "page": {"title": "Home"}}}
    )
    assert merged.defaults == {
        "site": {"name": "Acme", "slogan": None},
        "page": {"title": "Home"},
    }
    assert config.defaults["site"]["name"] is None


def test_config_merge_ignores_none():
    config = TokenConfig(delimiter="/", defaults={"site": {"name": "Acme"}})
    merged = config_merge(config, {"delimiter": None, "defaults": {"site": {"name": None}}})
    assert merged.delimiter == "/"
    assert merged.defaults == {"site": {"name": "Acme"}}


def test_config_merge_keeps_new_unset_tokens():
    merged = config_merge(TokenConfig(defaults={}), {"defaults": {"page": {"title": None}}})
    assert merged.defaults == {"page": {"title": None}}


def test_config_merge_replaces_scalars_and_lists():
    config = TokenConfig(defaults={"tags": ["a"], "site": "flat"})
    merged = config_merge(config, {"defaults": {"tags": ["b"], "site": {"name": "X"}}})
    assert merged.defaults == {"tags": ["b"], "site": {"name": "X"}}


def test_config_merge_validates():
    with pytest.raises(ValidationError):
        config_merge(TokenConfig(), {"delimiter": ""})


def test_defaults_read(tmp_path: Path):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({"site": {"name": "Acme"}}))
    assert defaults_read(path) == {"site": {"name": "Acme"}}


@pytest.mark.parametrize(
    "content,message",
    [
        ("not json", "not valid JSON"),
        ("[1, 2]", "must contain a JSON object"),
    ],
)
def test_defaults_read_invalid(tmp_path: Path, content: str, message: str):
    path = tmp_path / "tokens.json"
    path.write_text(content)
    with pytest.raises(ValueError, match=message):
        defaults_read(path)


def test_defaults_read_missing(tmp_path: Path):
    with pytest.raises(ValueError, match="Cannot read defaults file"):
        defaults_read(tmp_path / "missing.json")


def test_defaults_file_resolve(tmp_path: Path, no_user_tokens):
    assert defaultsFile_resolve(App()) is None
    explicit = tmp_path / "explicit.json"
    assert defaultsFile_resolve(App(defaults_file=explicit)) == explicit


def test_defaults_file_resolve_user_file(tmp_path: Path):
    user_file = tmp_path / "tokens.json"
    user_file.write_text("{}")
    with patch("nbtoken.config.settings.TOKENS_FILE", user_file):
        assert defaultsFile_resolve(App()) == user_file


def test_config_load_builtin(no_user_tokens):
    config = config_load(App())
    assert config == TokenConfig()


def test_config_load_file_and_overrides(tmp_path: Path, no_user_tokens):
    path = tmp_path / "tokens.json"
    path.write_text(json.dumps({"site": {"name": "Acme"}}))
    config = config_load(
        App(defaults_file=path, delimiter="."),
        {"defaults": {"site": {"slogan": "Hi"}}},
    )
    assert config.delimiter == "."
    assert config.defaults == {"site": {"name": "Acme", "slogan": "Hi"}}
