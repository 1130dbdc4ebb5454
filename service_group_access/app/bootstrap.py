"""
Wires the settings registry to its collaborators from configuration.
"""

from shared.config import BaseConfig
from shared.logging import get_logger
from .directory.catalog import YamlDirectoryCatalog
from .persistence.store import InMemorySettingsStore, JsonFileSettingsStore, SettingsStore
from .settings.registry import SettingsRegistry

logger = get_logger("group_access.bootstrap")


def build_store(config: BaseConfig) -> SettingsStore:
    if config.settings_file:
        return JsonFileSettingsStore(config.settings_file)
    logger.warning("No settings file configured, changes will not survive a restart")
    return InMemorySettingsStore()


def build_registry(config: BaseConfig) -> SettingsRegistry:
    """Create a registry backed by the YAML catalog and the configured store."""
    catalog = YamlDirectoryCatalog(config.catalog_file)
    registry = SettingsRegistry(catalog, catalog, build_store(config))
    logger.info(
        "Settings registry ready",
        catalog=config.catalog_file,
        sites=len(registry.sites),
        groups=len(registry.group_catalog.get())
    )
    return registry
