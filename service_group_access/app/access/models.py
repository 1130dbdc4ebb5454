"""
Access data models for the Group Access Service.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, Field


class AccessLevel(str, Enum):
    """Site access levels, lowest first."""
    VIEW = "view"
    ADMIN = "admin"


def _normalize_groups(groups: Any) -> FrozenSet[str]:
    if isinstance(groups, str):
        return frozenset([groups])
    if isinstance(groups, (list, tuple, set, frozenset)):
        return frozenset(g for g in groups if isinstance(g, str))
    return frozenset()


@dataclass(frozen=True)
class Principal:
    """The group memberships access is resolved for.

    ``groups`` is ``None`` when the directory entry carries no group
    information at all, which is distinct from an empty membership.
    """
    groups: Optional[FrozenSet[str]] = None

    @classmethod
    def from_groups(cls, groups: Any) -> "Principal":
        if groups is None:
            return cls()
        return cls(groups=_normalize_groups(groups))

    @classmethod
    def from_entry(cls, entry: Any) -> "Principal":
        """Build a principal from a directory entry such as ``{"groups": [...]}``."""
        if not isinstance(entry, Mapping) or "groups" not in entry:
            return cls()
        return cls.from_groups(entry["groups"])

    @property
    def memberships(self) -> FrozenSet[str]:
        return self.groups or frozenset()


@dataclass
class AccessGrant:
    """Resolved access of a principal.

    Either ``superuser`` is true, or ``sites_by_access`` maps access levels
    to site ids. An empty mapping is reported as ``{"superuser": False}``.
    """
    superuser: bool = False
    sites_by_access: Dict[AccessLevel, List[int]] = field(default_factory=dict)

    def sites_for(self, level: AccessLevel) -> List[int]:
        return list(self.sites_by_access.get(level, []))

    def to_dict(self) -> Dict[str, Any]:
        if self.superuser:
            return {"superuser": True}
        if not self.sites_by_access:
            return {"superuser": False}
        return {level.value: list(site_ids) for level, site_ids in self.sites_by_access.items()}


class AccessResolveRequest(BaseModel):
    """Request model for access resolution."""
    groups: Optional[List[str]] = Field(None, description="Directory groups the user is member of")


class AccessResolveResponse(BaseModel):
    """Response model for access resolution."""
    enabled: bool = Field(..., description="Whether access by LDAP groups is enabled")
    access: Dict[str, Any] = Field(..., description="Superuser flag or access level to site ids")
