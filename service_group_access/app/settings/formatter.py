"""
Display formatting for setting values.
"""

import json

from .models import Setting, SettingType


def format_setting_value(setting: Setting) -> str:
    """Render a setting's current value for listings and confirmations."""
    value = setting.get_value()

    if setting.type == SettingType.BOOL:
        return "true" if value else "false"
    if setting.type == SettingType.ARRAY:
        return ",".join(str(item) for item in value)
    if setting.type == SettingType.STRING:
        return value

    return json.dumps(value)
