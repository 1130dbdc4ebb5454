"""
Settings registry for Group Access Service.
"""

from typing import Any, Callable, Dict, List, Optional

from shared.errors import GroupAccessException, PersistenceError
from shared.logging import get_logger
from ..directory.catalog import GroupLister, Site, SiteCatalog
from ..persistence.store import InMemorySettingsStore, SettingsStore
from .models import Setting, SettingType, transform_group_list, validate_group_list


ACCESS_BY_LDAP_GROUPS = "accessByLdapGroups"
SUPER_ACCESS_GROUPS = "superAccessGroups"


def admin_groups_setting_name(site_id: int) -> str:
    return f"{site_id}_adminGroups"


def view_groups_setting_name(site_id: int) -> str:
    return f"{site_id}_viewGroups"


class GroupCatalogCache:
    """Memoizes the directory's group names for the lifetime of a registry.

    The cache is either unfetched (``groups is None``) or fetched. A failing
    fetch is cached as an empty list so the registry stays usable while the
    directory is unreachable; every group-list setting then rejects all
    non-empty values until a new registry is built.
    """

    def __init__(self, fetch: Callable[[], List[str]]):
        self._fetch = fetch
        self.groups: Optional[List[str]] = None
        self.failed = False
        self.logger = get_logger("group_access.settings.groups")

    @property
    def fetched(self) -> bool:
        return self.groups is not None

    def get(self) -> List[str]:
        if self.groups is None:
            try:
                # listers may hand back lazy, paged results that fail while iterated
                groups = sorted(set(self._fetch()))
            except Exception as e:
                self.logger.warning("Unable to list directory groups", error=str(e))
                groups = []
                self.failed = True
            self.groups = groups
            self.logger.debug("Directory groups cached", count=len(self.groups))
        return self.groups


class SettingsRegistry:
    """Typed settings that configure group based access.

    Usage::

        registry = SettingsRegistry(directory, directory, store)
        registry.super_access_groups.get_value()
    """

    def __init__(
        self,
        group_lister: GroupLister,
        site_catalog: SiteCatalog,
        store: Optional[SettingsStore] = None
    ):
        self.logger = get_logger("group_access.settings.registry")
        self.store = store if store is not None else InMemorySettingsStore()
        self.group_catalog = GroupCatalogCache(group_lister.get_all_group_names)
        self.settings: Dict[str, Setting] = {}

        self.sites: List[Site] = site_catalog.get_all_sites()
        self.site_admin_groups: Dict[int, Setting] = {}
        self.site_view_groups: Dict[int, Setting] = {}

        self.access_by_ldap_groups = self._create_access_by_ldap_groups_setting()
        self.super_access_groups = self._create_super_access_groups_setting()
        self._create_site_admin_groups_settings()
        self._create_site_view_groups_settings()

        self._load()

    def _add_setting(self, setting: Setting) -> Setting:
        self.settings[setting.name] = setting
        return setting

    def _create_access_by_ldap_groups_setting(self) -> Setting:
        return self._add_setting(Setting(
            name=ACCESS_BY_LDAP_GROUPS,
            title="Access can be configured by LDAP user groups",
            type=SettingType.BOOL,
            default_value=False,
            description="If enabled, the group access settings will be used for LDAP users"
        ))

    def _create_super_access_groups_setting(self) -> Setting:
        return self._add_setting(self._group_setting(
            SUPER_ACCESS_GROUPS,
            "Super User Access by LDAP group",
            "If the user is directly or recursively member of any of the groups, "
            "super user access will be granted"
        ))

    def _create_site_admin_groups_settings(self):
        for site in self.sites:
            self.site_admin_groups[site.id] = self._add_setting(self._group_setting(
                admin_groups_setting_name(site.id),
                f"Admin access of LDAP groups to site: {site.id} | {site.name} | {site.main_url}",
                "If the user is directly or recursively member of any of the groups, "
                f"admin access will be granted to site: {site.id}"
            ))

    def _create_site_view_groups_settings(self):
        for site in self.sites:
            self.site_view_groups[site.id] = self._add_setting(self._group_setting(
                view_groups_setting_name(site.id),
                f"View access of LDAP groups to site: {site.id} | {site.name} | {site.main_url}",
                "If the user is directly or recursively member of any of the groups, "
                f"view access will be granted to site: {site.id}"
            ))

    def _group_setting(self, name: str, title: str, description: str) -> Setting:
        return Setting(
            name=name,
            title=title,
            type=SettingType.ARRAY,
            default_value=[],
            description=description,
            available_values=self.group_catalog.get(),
            transform=transform_group_list,
            validate=validate_group_list
        )

    def _load(self):
        """Restore persisted values onto the freshly created settings."""
        values = self.store.load()
        for name, value in values.items():
            setting = self.settings.get(name)
            if setting is None:
                self.logger.debug("Ignoring persisted value for unknown setting", setting=name)
                continue
            try:
                setting.restore(value)
            except GroupAccessException as e:
                self.logger.warning("Persisted value rejected, using default", setting=name, error=e.message)

    def get_setting(self, name: str) -> Optional[Setting]:
        """Get a setting by name."""
        return self.settings.get(name)

    def get_all_settings(self) -> List[Setting]:
        """Get all settings in creation order."""
        return list(self.settings.values())

    def get_values(self) -> Dict[str, Any]:
        return {name: setting.get_value() for name, setting in self.settings.items()}

    def save(self):
        """Persist the current value of every setting."""
        values = self.get_values()
        try:
            self.store.save(values)
        except PersistenceError:
            raise
        except Exception as e:
            self.logger.error("Error saving settings", error=str(e))
            raise PersistenceError("Unable to save settings", {"error": str(e)})

        self.logger.info("Settings saved", count=len(values))
