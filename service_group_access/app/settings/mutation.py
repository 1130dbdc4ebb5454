"""
Mutation engine for typed settings.

Four modes are supported:

- add: add to array; append to string; mathematical add for float or int
- set: overwrite with given value
- remove: for array, remove given values; for string remove substrings;
  mathematical subtraction for float or int
- reset: reset value to default

``compute_update`` is pure: it returns the new value and never touches the
setting. ``SettingsMutator.apply`` commits the value through the setting's
own transform and validate rules; persisting is left to the caller.
"""

import copy
import re
from enum import Enum
from typing import Any, List, Sequence, Union

from shared.errors import (
    InvalidModeError, MissingValueError, PersistenceError, SettingNotFoundError,
    UnsupportedOperationError
)
from shared.logging import get_logger
from .models import Setting, SettingType
from .registry import SettingsRegistry


class MutationMode(str, Enum):
    """Setting mutation modes."""
    ADD = "add"
    SET = "set"
    REMOVE = "remove"
    RESET = "reset"


MODE_DESCRIPTIONS = {
    MutationMode.ADD: "add to array; append to string; mathematical add for float or int",
    MutationMode.SET: "overwrite with given value",
    MutationMode.REMOVE: "for array, remove given value; for string remove substring; mathematical sub for float or int",
    MutationMode.RESET: "reset value to default",
}

_INT_PREFIX = re.compile(r'^\s*[+-]?\d+')
_FLOAT_PREFIX = re.compile(r'^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?')


def parse_int(raw: str) -> int:
    """Parse the leading integer of ``raw``; ``0`` when there is none."""
    match = _INT_PREFIX.match(raw)
    return int(match.group()) if match else 0


def parse_float(raw: str) -> float:
    """Parse the leading decimal number of ``raw``; ``0.0`` when there is none."""
    match = _FLOAT_PREFIX.match(raw)
    return float(match.group()) if match else 0.0


def parse_mode(mode: Union[str, MutationMode]) -> MutationMode:
    try:
        return MutationMode(mode)
    except ValueError:
        raise InvalidModeError(str(mode))


def compute_update(mode: MutationMode, setting: Setting, values: Sequence[str]) -> Any:
    """Return the value ``setting`` would hold after applying ``mode``."""
    values = list(values)

    if mode == MutationMode.RESET:
        return copy.deepcopy(setting.default_value)
    if mode == MutationMode.SET:
        return _set(setting, values)
    if mode == MutationMode.ADD:
        return _add(setting, values)
    if mode == MutationMode.REMOVE:
        return _remove(setting, values)

    raise InvalidModeError(str(mode))


def _add(setting: Setting, values: List[str]) -> Any:
    value = setting.get_value()

    if setting.type == SettingType.FLOAT:
        return float(value) + sum(parse_float(v) for v in values)
    if setting.type == SettingType.INT:
        return int(value) + sum(parse_int(v) for v in values)
    if setting.type == SettingType.STRING:
        return value + "".join(values)
    if setting.type == SettingType.ARRAY:
        return list(value) + values

    raise UnsupportedOperationError(MutationMode.ADD.value, setting.type.value)


def _set(setting: Setting, values: List[str]) -> Any:
    if not values:
        raise MissingValueError()

    if setting.type == SettingType.FLOAT:
        return parse_float(values[0])
    if setting.type == SettingType.INT:
        return parse_int(values[0])
    if setting.type == SettingType.STRING:
        return "".join(values)
    if setting.type == SettingType.ARRAY:
        return values
    if setting.type == SettingType.BOOL:
        flag = values[0].lower()
        if flag == "true":
            return True
        if flag == "false":
            return False
        return parse_int(values[0])

    raise UnsupportedOperationError(MutationMode.SET.value, setting.type.value)


def _remove(setting: Setting, values: List[str]) -> Any:
    value = setting.get_value()

    if setting.type == SettingType.FLOAT:
        return float(value) - sum(parse_float(v) for v in values)
    if setting.type == SettingType.INT:
        return int(value) - sum(parse_int(v) for v in values)
    if setting.type == SettingType.STRING:
        for v in values:
            value = value.replace(v, "")
        return value
    if setting.type == SettingType.ARRAY:
        return [member for member in value if member not in values]

    raise UnsupportedOperationError(MutationMode.REMOVE.value, setting.type.value)


class SettingsMutator:
    """Applies mutation modes to the settings of a registry."""

    def __init__(self, registry: SettingsRegistry):
        self.registry = registry
        self.logger = get_logger("group_access.settings.mutation")

    def apply(self, setting_name: str, mode: Union[str, MutationMode], values: Sequence[str] = ()) -> Setting:
        """Mutate a setting in memory and return it.

        Raises before any change when the setting is unknown, the mode is
        invalid, the mode does not fit the type or the new value fails
        validation.
        """
        setting = self.registry.get_setting(setting_name)
        if setting is None:
            raise SettingNotFoundError(setting_name)

        mode = parse_mode(mode)
        updated = compute_update(mode, setting, values)
        setting.set_value(updated)

        self.logger.info(
            "Setting changed",
            setting=setting.name,
            mode=mode.value,
            values=list(values)
        )
        return setting

    def apply_and_save(self, setting_name: str, mode: Union[str, MutationMode], values: Sequence[str] = ()) -> Setting:
        """Mutate a setting and persist the registry.

        When saving fails the in-memory value is rolled back, so memory and
        store never disagree.
        """
        setting = self.registry.get_setting(setting_name)
        previous = setting.get_value() if setting is not None else None

        setting = self.apply(setting_name, mode, values)
        try:
            self.registry.save()
        except PersistenceError:
            setting.restore(previous)
            raise
        return setting
