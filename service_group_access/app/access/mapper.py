"""
Group based access resolution for Group Access Service.
"""

from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from shared.logging import get_logger
from ..settings.models import Setting
from ..settings.registry import SettingsRegistry
from .models import AccessGrant, AccessLevel, Principal


class GroupAccessMapper:
    """Uses directory groups to determine a user's site access.

    The settings registry holds the groups granting super user access and,
    per site, the groups granting admin or view access. This class does not
    store access anywhere, it only determines what it should be.
    """

    def __init__(self, registry: SettingsRegistry):
        self.registry = registry
        self.logger = get_logger("group_access.access.mapper")

    @property
    def enabled(self) -> bool:
        """Whether access by LDAP groups is switched on."""
        return bool(self.registry.access_by_ldap_groups.get_value())

    def resolve(self, principal: Union[Principal, Dict[str, Any], None]) -> AccessGrant:
        """Return the access granted by the principal's group memberships.

        A superuser grant short-circuits everything else. Otherwise view
        access is collected first and admin access second, so admin wins
        when a site grants both to the same user.
        """
        if not isinstance(principal, Principal):
            principal = Principal.from_entry(principal)

        if self._is_super_user(principal):
            self.logger.debug("Principal found to be superuser", groups=sorted(principal.memberships))
            return AccessGrant(superuser=True)

        groups = principal.memberships
        access_by_site: Dict[int, AccessLevel] = {}

        for site_id, setting in self.registry.site_view_groups.items():
            if _intersects(groups, setting):
                access_by_site[site_id] = AccessLevel.VIEW

        # overwrites view access for the same site
        for site_id, setting in self.registry.site_admin_groups.items():
            if _intersects(groups, setting):
                access_by_site[site_id] = AccessLevel.ADMIN

        grant = AccessGrant()
        for site_id, level in access_by_site.items():
            grant.sites_by_access.setdefault(level, []).append(site_id)

        self.logger.debug("Access resolved", groups=sorted(groups), access=grant.to_dict())
        return grant

    def _is_super_user(self, principal: Principal) -> bool:
        if principal.groups is None:
            return False
        return _intersects(principal.groups, self.registry.super_access_groups)

    def resolve_groups(self, groups: Optional[Iterable[str]]) -> AccessGrant:
        """Resolve access for a plain collection of group names."""
        if groups is not None and not isinstance(groups, str):
            groups = list(groups)
        return self.resolve(Principal.from_groups(groups))


def _intersects(groups: FrozenSet[str], setting: Setting) -> bool:
    return not groups.isdisjoint(setting.get_value())
