"""
CacheAPI — Settings Surface

Field descriptors that backends contribute to the host's administrative
settings screen through ``cache_settings()``.
"""

from collections.abc import MutableMapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FieldKind(str, Enum):
    """How the host should render a settings field."""

    TEXT = "text"
    INT = "int"
    CHECK = "check"
    SELECT = "select"
    PATH = "path"


class SettingField(BaseModel):
    """One configuration field exposed to the host's settings UI."""

    name: str = Field(description="Config key the field writes to")
    kind: FieldKind = Field(default=FieldKind.TEXT, description="Input type")
    label: str = Field(default="", description="Human-readable label")
    help: str = Field(default="", description="Help text shown next to the field")
    default: Any = Field(default=None, description="Default value")
    options: list[str] = Field(default_factory=list, description="Choices for select fields")
    backend: str = Field(default="", description="Backend that contributed the field")


SettingsSurface = MutableMapping[str, SettingField]


def add_setting(config_vars: SettingsSurface, field: SettingField) -> None:
    """Add or replace a field by name, leaving every other entry in place."""
    config_vars[field.name] = field
