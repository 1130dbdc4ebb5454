"""
Unit tests for the Group Access service HTTP surface.
"""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_group_access.app.directory.catalog import Site, StaticDirectoryCatalog
from service_group_access.app.main import GroupAccessService, create_app
from service_group_access.app.persistence.store import InMemorySettingsStore
from service_group_access.app.settings.registry import SettingsRegistry
from shared.config import get_config
from shared.errors import DirectoryUnavailableError


class TestGroupAccessService:
    """Test cases for GroupAccessService."""

    @pytest.fixture
    def store(self):
        return InMemorySettingsStore()

    @pytest.fixture
    def registry(self, store):
        directory = StaticDirectoryCatalog(
            groups=["admins", "readers", "writers"],
            sites=[Site(id=1, name="Intranet"), Site(id=2, name="Shop")]
        )
        return SettingsRegistry(directory, directory, store)

    @pytest.fixture
    def app(self, registry):
        """Create FastAPI app instance."""
        return create_app(config=get_config("group_access", 8020, log_level="error"), registry=registry)

    @pytest.fixture
    def client(self, app):
        """Create test client."""
        return TestClient(app)

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "group_access"
        assert data["modes"] == ["add", "set", "remove", "reset"]

    def test_health_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["dependencies"] == {"directory_groups": "ok", "group_count": 3, "sites": 2}

    def test_health_reports_unavailable_directory(self):
        lister = MagicMock()
        lister.get_all_group_names.side_effect = ConnectionError("ldap down")
        registry = SettingsRegistry(lister, StaticDirectoryCatalog(sites=[Site(id=1, name="Intranet")]))
        client = TestClient(create_app(config=get_config("group_access", 8020, log_level="error"), registry=registry))

        response = client.get("/health")

        assert response.json()["dependencies"] == {"directory_groups": "unavailable", "group_count": 0, "sites": 1}

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_list_settings(self, client):
        response = client.get("/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 6
        assert [s["name"] for s in data["settings"]][:2] == ["accessByLdapGroups", "superAccessGroups"]
        assert data["settings"][0]["type"] == "boolean"
        assert data["settings"][0]["formatted_value"] == "false"

    def test_get_setting(self, client):
        response = client.get("/settings/2_adminGroups")

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "array"
        assert data["value"] == []
        assert data["available_values"] == ["admins", "readers", "writers"]

    def test_get_setting_not_found(self, client):
        response = client.get("/settings/9_adminGroups")

        assert response.status_code == 404
        assert response.json()["code"] == "SETTING_NOT_FOUND"

    def test_modify_setting(self, client, store):
        response = client.post("/settings/superAccessGroups", json={"mode": "add", "values": ["admins"]})

        assert response.status_code == 200
        assert response.json()["value"] == ["admins"]
        assert response.json()["formatted_value"] == "admins"
        assert store.values["superAccessGroups"] == ["admins"]

    def test_modify_setting_invalid_mode(self, client, store):
        response = client.post("/settings/superAccessGroups", json={"mode": "merge", "values": ["admins"]})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_MODE"
        assert store.save_count == 0

    def test_modify_setting_validation_failed(self, client, registry):
        response = client.post("/settings/1_viewGroups", json={"mode": "set", "values": ["strangers"]})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"
        assert registry.site_view_groups[1].get_value() == []

    def test_modify_setting_missing_value(self, client):
        response = client.post("/settings/accessByLdapGroups", json={"mode": "set"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_VALUE"

    def test_modify_setting_persistence_error(self, client, registry):
        registry.store = MagicMock()
        registry.store.save.side_effect = OSError("disk full")

        response = client.post("/settings/superAccessGroups", json={"mode": "set", "values": ["admins"]})

        assert response.status_code == 500
        assert response.json()["code"] == "PERSISTENCE_ERROR"
        assert registry.super_access_groups.get_value() == []

    def test_directory_unavailable_maps_to_503(self, app):
        @app.get("/catalog-down")
        async def catalog_down():
            raise DirectoryUnavailableError("Unable to read catalog catalog.yaml")

        response = TestClient(app).get("/catalog-down")

        assert response.status_code == 503
        assert response.json()["code"] == "DIRECTORY_UNAVAILABLE"

    def test_resolve_access(self, client, registry):
        registry.site_view_groups[1].set_value(["readers"])
        registry.site_admin_groups[2].set_value(["readers"])

        response = client.post("/access/resolve", json={"groups": ["readers"]})

        assert response.status_code == 200
        assert response.json() == {"enabled": False, "access": {"view": [1], "admin": [2]}}

    def test_resolve_superuser(self, client):
        client.post("/settings/superAccessGroups", json={"mode": "set", "values": ["admins"]})
        client.post("/settings/accessByLdapGroups", json={"mode": "set", "values": ["true"]})

        response = client.post("/access/resolve", json={"groups": ["admins", "x"]})

        assert response.json() == {"enabled": True, "access": {"superuser": True}}

    def test_resolve_without_groups(self, client, registry):
        registry.super_access_groups.set_value(["admins"])

        response = client.post("/access/resolve", json={})

        assert response.json()["access"] == {"superuser": False}

    def test_service_builds_registry_from_config(self, tmp_path):
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text("groups: [admins]\nsites:\n  - id: 5\n    name: Docs\n")
        config = get_config("group_access", 8020, catalog_file=str(catalog), log_level="error")

        service = GroupAccessService(config=config)

        assert [s.id for s in service.registry.sites] == [5]
        assert service.registry.get_setting("5_viewGroups") is not None
