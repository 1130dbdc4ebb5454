"""
Setting data models for the Group Access Service.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, Field

from shared.errors import ValidationFailedError


class SettingType(str, Enum):
    """Setting value types."""
    BOOL = "boolean"
    INT = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"


# (value, setting) -> normalized value
TransformRule = Callable[[Any, "Setting"], Any]
# (value, setting) -> None, raises ValidationFailedError
ValidateRule = Callable[[Any, "Setting"], None]


def coerce_value(value: Any, setting_type: SettingType) -> Any:
    """Coerce a raw value to the Python type of ``setting_type``."""
    if setting_type == SettingType.BOOL:
        if isinstance(value, str):
            flag = value.strip().lower()
            if flag not in ("true", "false"):
                raise ValueError(f"Not a boolean: {value!r}")
            return flag == "true"
        return bool(value)
    if setting_type == SettingType.INT:
        return int(value)
    if setting_type == SettingType.FLOAT:
        return float(value)
    if setting_type == SettingType.STRING:
        return "" if value is None else str(value)
    if setting_type == SettingType.ARRAY:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set, frozenset)):
            return list(value)
        return [value]
    raise ValueError(f"Unknown setting type: {setting_type}")


@dataclass
class Setting:
    """A named, typed configuration entry.

    The value is only ever replaced through :meth:`set_value`, which runs the
    transform rule and then the validate rule. A rejected value leaves the
    current value untouched.
    """
    name: str
    title: str
    type: SettingType
    default_value: Any
    description: Optional[str] = None
    available_values: Optional[List[str]] = None
    transform: Optional[TransformRule] = None
    validate: Optional[ValidateRule] = None
    _value: Any = field(default=None, repr=False)
    _is_set: bool = field(default=False, repr=False)

    def get_value(self) -> Any:
        """Return the current value, or a copy of the default when unset."""
        if not self._is_set:
            return copy.deepcopy(self.default_value)
        return copy.deepcopy(self._value)

    def set_value(self, value: Any) -> None:
        """Transform, validate and commit a new value."""
        value = self._transform(value)
        if self.validate is not None:
            self.validate(value, self)
        self._value = value
        self._is_set = True

    def restore(self, value: Any) -> None:
        """Commit a persisted value; runs the transform rule only."""
        self._value = self._transform(value)
        self._is_set = True

    def _transform(self, value: Any) -> Any:
        if self.transform is not None:
            return self.transform(value, self)
        try:
            return coerce_value(value, self.type)
        except (TypeError, ValueError) as e:
            raise ValidationFailedError(
                f"Value {value!r} is not a valid {self.type.value} for setting {self.name}",
                {"setting": self.name, "error": str(e)}
            )


def transform_group_list(value: Any, setting: Setting) -> List[str]:
    """Normalize a group list; an empty selection becomes an empty list."""
    if not value:
        return []
    return [str(item) for item in coerce_value(value, SettingType.ARRAY)]


def validate_group_list(value: Any, setting: Setting) -> None:
    """Reject any member that is not one of the setting's available values."""
    if not value:
        return

    allowed = set(setting.available_values or [])
    rejected = [group for group in value if group not in allowed]
    if rejected:
        raise ValidationFailedError(
            f"The value for the setting '{setting.title}' is not allowed",
            {"setting": setting.name, "rejected": rejected}
        )


class SettingResponse(BaseModel):
    """Response model for a single setting."""
    name: str
    title: str
    type: SettingType
    value: Any
    formatted_value: str = Field(..., description="Value as shown by the settings listing")
    default_value: Any
    description: Optional[str] = None
    available_values: Optional[List[str]] = None


class SettingListResponse(BaseModel):
    """Response model for the settings listing."""
    settings: List[SettingResponse]
    total: int


class SettingModifyRequest(BaseModel):
    """Request model for modifying a setting."""
    mode: str = Field(..., description="One of add, set, remove, reset")
    values: List[str] = Field(default_factory=list, description="The values to add, set, remove")
