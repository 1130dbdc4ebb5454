"""
Unit tests for group based access resolution.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_group_access.app.access.mapper import GroupAccessMapper
from service_group_access.app.access.models import AccessGrant, AccessLevel, Principal
from service_group_access.app.directory.catalog import Site, StaticDirectoryCatalog
from service_group_access.app.settings.registry import SettingsRegistry


class TestGroupAccessMapper:
    """Test cases for GroupAccessMapper."""

    @pytest.fixture
    def registry(self):
        directory = StaticDirectoryCatalog(
            groups=["admins", "readers", "writers", "auditors", "x"],
            sites=[Site(id=1, name="Intranet"), Site(id=2, name="Shop"), Site(id=3, name="Blog")]
        )
        return SettingsRegistry(directory, directory)

    @pytest.fixture
    def mapper(self, registry):
        return GroupAccessMapper(registry)

    def test_superuser_by_group(self, mapper, registry):
        registry.super_access_groups.set_value(["admins"])

        grant = mapper.resolve({"groups": ["admins", "x"]})

        assert grant.to_dict() == {"superuser": True}

    def test_superuser_short_circuits_site_access(self, mapper, registry):
        registry.super_access_groups.set_value(["admins"])
        registry.site_view_groups[1].set_value(["admins"])
        registry.site_admin_groups[2].set_value(["admins"])

        grant = mapper.resolve(Principal.from_groups(["admins"]))

        assert grant.superuser is True
        assert grant.sites_by_access == {}

    def test_view_and_admin_on_different_sites(self, mapper, registry):
        registry.site_view_groups[1].set_value(["readers"])
        registry.site_admin_groups[2].set_value(["readers"])

        grant = mapper.resolve({"groups": ["readers"]})

        assert grant.to_dict() == {"view": [1], "admin": [2]}

    def test_admin_dominates_view(self, mapper, registry):
        registry.site_view_groups[2].set_value(["writers"])
        registry.site_admin_groups[2].set_value(["writers"])

        grant = mapper.resolve({"groups": ["writers"]})

        assert grant.sites_for(AccessLevel.ADMIN) == [2]
        assert grant.sites_for(AccessLevel.VIEW) == []
        assert grant.to_dict() == {"admin": [2]}

    def test_admin_dominates_view_through_different_groups(self, mapper, registry):
        registry.site_view_groups[3].set_value(["readers"])
        registry.site_admin_groups[3].set_value(["writers"])

        grant = mapper.resolve({"groups": ["readers", "writers"]})

        assert grant.to_dict() == {"admin": [3]}

    def test_sites_listed_in_catalog_order(self, mapper, registry):
        for site_id in (3, 1, 2):
            registry.site_view_groups[site_id].set_value(["auditors"])

        grant = mapper.resolve({"groups": ["auditors"]})

        assert grant.sites_for(AccessLevel.VIEW) == [1, 2, 3]

    def test_no_matching_group(self, mapper, registry):
        registry.super_access_groups.set_value(["admins"])
        registry.site_view_groups[1].set_value(["readers"])

        grant = mapper.resolve({"groups": ["x"]})

        assert grant.to_dict() == {"superuser": False}

    def test_missing_groups_field_is_not_superuser(self, mapper, registry):
        registry.super_access_groups.set_value(["admins"])

        grant = mapper.resolve({"uid": "jdoe"})

        assert grant.to_dict() == {"superuser": False}

    def test_empty_groups_is_not_superuser(self, mapper, registry):
        registry.super_access_groups.set_value(["admins"])

        assert mapper.resolve({"groups": []}).to_dict() == {"superuser": False}

    @pytest.mark.parametrize("principal", [None, "admins", 42, {"groups": 42}, {"groups": {"a": 1}}])
    def test_malformed_principal_has_no_access(self, mapper, registry, principal):
        registry.super_access_groups.set_value(["admins"])
        registry.site_view_groups[1].set_value(["readers"])

        assert mapper.resolve(principal).to_dict() == {"superuser": False}

    def test_single_string_group(self, mapper, registry):
        registry.site_admin_groups[1].set_value(["writers"])

        assert mapper.resolve({"groups": "writers"}).to_dict() == {"admin": [1]}

    def test_non_string_members_ignored(self, mapper, registry):
        registry.site_view_groups[2].set_value(["readers"])

        assert mapper.resolve({"groups": [None, 3, "readers"]}).to_dict() == {"view": [2]}

    def test_resolve_groups(self, mapper, registry):
        registry.site_view_groups[1].set_value(["readers"])

        assert mapper.resolve_groups(iter(["readers"])).to_dict() == {"view": [1]}
        assert mapper.resolve_groups(None).to_dict() == {"superuser": False}

    def test_resolution_reflects_current_settings(self, mapper, registry):
        registry.site_view_groups[1].set_value(["readers"])
        assert mapper.resolve({"groups": ["readers"]}).to_dict() == {"view": [1]}

        registry.site_view_groups[1].set_value([])
        assert mapper.resolve({"groups": ["readers"]}).to_dict() == {"superuser": False}

    def test_enabled_follows_toggle(self, mapper, registry):
        assert mapper.enabled is False

        registry.access_by_ldap_groups.set_value(True)

        assert mapper.enabled is True


class TestAccessGrant:
    """Test cases for AccessGrant."""

    def test_empty_grant(self):
        assert AccessGrant().to_dict() == {"superuser": False}

    def test_superuser_grant_ignores_sites(self):
        grant = AccessGrant(superuser=True, sites_by_access={AccessLevel.VIEW: [1]})

        assert grant.to_dict() == {"superuser": True}

    def test_levels_serialized_by_value(self):
        grant = AccessGrant(sites_by_access={AccessLevel.ADMIN: [4, 5]})

        assert grant.to_dict() == {"admin": [4, 5]}


class TestPrincipal:
    """Test cases for Principal."""

    def test_from_entry_without_groups(self):
        principal = Principal.from_entry({"cn": "jdoe"})

        assert principal.groups is None
        assert principal.memberships == frozenset()

    def test_from_entry_with_groups(self):
        principal = Principal.from_entry({"groups": ["a", "b", "a"]})

        assert principal.groups == frozenset({"a", "b"})
