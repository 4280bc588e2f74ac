"""Tests for binder configuration loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from schemabind import compile_schema
from schemabind.config import DEFAULT_CONFIG, BinderConfig, load_binder_config
from schemabind.exceptions import ConfigLoadError


def _write_yaml(path: Path, payload) -> None:
    path.write_text(yaml.safe_dump(payload))


def test_defaults() -> None:
    assert DEFAULT_CONFIG.keyword == "bind"
    assert DEFAULT_CONFIG.default_family == "jmes"
    assert DEFAULT_CONFIG.validate_output is True
    assert DEFAULT_CONFIG.draft == "draft7"


def test_config_is_frozen() -> None:
    with pytest.raises(ValidationError):
        DEFAULT_CONFIG.keyword = "other"


def test_unknown_draft_rejected() -> None:
    with pytest.raises(ValidationError):
        BinderConfig(draft="draft3")


def test_load_config(tmp_path: Path) -> None:
    path = tmp_path / "binder.yaml"
    _write_yaml(path, {"keyword": "x-bind", "default_family": "pointer", "validate_output": False})

    config = load_binder_config(path)

    assert config.keyword == "x-bind"
    assert config.default_family == "pointer"
    assert config.validate_output is False


def test_loaded_config_drives_compile(tmp_path: Path) -> None:
    path = tmp_path / "binder.yaml"
    _write_yaml(path, {"keyword": "x-bind", "default_family": "pointer"})

    binder = compile_schema({"properties": {"A": {"x-bind": "/a/b"}}}, config=load_binder_config(path))
    assert binder.bind(b'{"a": {"b": 2}}') == ({"A": 2}, True)


def test_missing_config(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError) as exc:
        load_binder_config(tmp_path / "binder.yaml")
    assert "File not found" in str(exc.value)


def test_empty_config(tmp_path: Path) -> None:
    path = tmp_path / "binder.yaml"
    path.write_text("")
    with pytest.raises(ConfigLoadError) as exc:
        load_binder_config(path)
    assert "Empty file" in str(exc.value)


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "binder.yaml"
    path.write_text("keyword: [unclosed\n")
    with pytest.raises(ConfigLoadError) as exc:
        load_binder_config(path)
    assert "Invalid YAML" in str(exc.value)
    assert isinstance(exc.value.__cause__, yaml.YAMLError)


def test_unknown_field(tmp_path: Path) -> None:
    path = tmp_path / "binder.yaml"
    _write_yaml(path, {"keyword": "bind", "window": 12})
    with pytest.raises(ConfigLoadError):
        load_binder_config(path)


def test_invalid_field_chains_validation_error(tmp_path: Path) -> None:
    path = tmp_path / "binder.yaml"
    _write_yaml(path, {"draft": "draft3"})
    with pytest.raises(ConfigLoadError) as exc:
        load_binder_config(path)
    assert isinstance(exc.value.__cause__, ValidationError)
