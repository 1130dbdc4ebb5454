"""
Command line tools for the Group Access Service.

    group-access settings-list
    group-access settings-modify superAccessGroups add admins
    group-access resolve readers staff
"""

import argparse
import json
import sys
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shared.config import BaseConfig
from shared.errors import GroupAccessException
from shared.logging import LOG_LEVELS, configure_logging, get_logger
from .access.mapper import GroupAccessMapper
from .bootstrap import build_registry
from .settings.formatter import format_setting_value
from .settings.mutation import MODE_DESCRIPTIONS, SettingsMutator
from .settings.registry import SettingsRegistry

logger = get_logger("group_access.cli")


def list_settings(registry: SettingsRegistry, console: Console) -> int:
    """Print every setting as a name/type/value table."""
    table = Table()
    table.add_column("name")
    table.add_column("type")
    table.add_column("value")

    for setting in registry.get_all_settings():
        table.add_row(
            escape(setting.name),
            setting.type.value,
            escape(format_setting_value(setting))
        )

    console.print(table)
    return 0


def modify_setting(
    registry: SettingsRegistry,
    setting_name: str,
    mode: str,
    values: Sequence[str],
    console: Console
) -> int:
    """Mutate one setting and persist the registry on success."""
    try:
        setting = SettingsMutator(registry).apply_and_save(setting_name, mode, values)
    except GroupAccessException as e:
        logger.warning("Setting not changed", setting=setting_name, mode=mode, code=e.code)
        console.print(f"[red]{escape(e.message)}[/red]", soft_wrap=True)
        console.print("[red]error occured, setting was not changed[/red]", soft_wrap=True)
        return 1

    console.print(
        f"[green]Setting \"{escape(setting.name)}\" changed to: "
        f"{escape(format_setting_value(setting))}[/green]",
        soft_wrap=True
    )
    return 0


def resolve_access(registry: SettingsRegistry, groups: Optional[List[str]], console: Console) -> int:
    """Print the access granted to members of ``groups`` as JSON."""
    mapper = GroupAccessMapper(registry)
    if not mapper.enabled:
        console.print("[yellow]access by LDAP groups is disabled[/yellow]", soft_wrap=True)

    grant = mapper.resolve_groups(groups)
    console.print_json(json.dumps(grant.to_dict()))
    return 0


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="group-access",
        description="Inspect and modify LDAP group access settings."
    )
    parser.add_argument("--catalog", default=None, help="YAML file listing directory groups and sites")
    parser.add_argument("--settings-file", default=None, help="JSON file the setting values are stored in")
    parser.add_argument("--log-level", default=None, type=str.lower, choices=LOG_LEVELS, help="Log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("settings-list", help="List the settings.")

    modify = subparsers.add_parser("settings-modify", help="Modify a setting.")
    modify.add_argument("setting", help="The name of the setting to modify")
    modify.add_argument(
        "mode",
        help="The mode, one of: " + "; ".join(
            f"{mode.value}: {description}" for mode, description in MODE_DESCRIPTIONS.items()
        )
    )
    modify.add_argument("values", nargs="*", help="The values to add, set, remove")

    resolve = subparsers.add_parser("resolve", help="Show the access granted to members of the given groups.")
    resolve.add_argument("groups", nargs="*", help="Directory groups the user is member of")

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    overrides = {}
    if args.catalog:
        overrides["catalog_file"] = args.catalog
    if args.settings_file:
        overrides["settings_file"] = args.settings_file
    if args.log_level:
        overrides["log_level"] = args.log_level
    config = BaseConfig(**overrides)

    configure_logging("group_access", config.log_level)
    console = Console()

    try:
        registry = build_registry(config)
    except GroupAccessException as e:
        console.print(f"[red]{escape(e.message)}[/red]", soft_wrap=True)
        return 1

    if args.command == "settings-list":
        return list_settings(registry, console)
    if args.command == "settings-modify":
        return modify_setting(registry, args.setting, args.mode, args.values, console)
    return resolve_access(registry, args.groups, console)


if __name__ == "__main__":
    sys.exit(main())
