"""Binder configuration and its YAML loader."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigLoadError

Draft = Literal["draft4", "draft6", "draft7", "draft2019-09", "draft2020-12"]


class BinderConfig(BaseModel):
    """Settings shared by every binder compiled with them.

    Attributes:
        keyword: Schema keyword holding the binding directive.
        default_family: Family used when a directive names none.
        validate_output: Validate bound values against the schema.
        draft: JSON Schema dialect used when the schema declares no $schema.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    keyword: str = Field(default="bind", min_length=1)
    default_family: str = Field(default="jmes", min_length=1)
    validate_output: bool = True
    draft: Draft = "draft7"


DEFAULT_CONFIG = BinderConfig()


def load_binder_config(path: Union[str, Path]) -> BinderConfig:
    """Load a BinderConfig from a YAML file.

    Raises:
        ConfigLoadError: If the file is missing, empty, not valid YAML or
            holds invalid settings.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigLoadError(path.name, "File not found")
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(path.name, f"Invalid YAML: {e}") from e
    if data is None:
        raise ConfigLoadError(path.name, "Empty file")
    if not isinstance(data, dict):
        raise ConfigLoadError(path.name, "Expected a mapping")
    try:
        return BinderConfig(**data)
    except ValidationError as e:
        raise ConfigLoadError(path.name, str(e)) from e


__all__ = ["BinderConfig", "DEFAULT_CONFIG", "Draft", "load_binder_config"]
