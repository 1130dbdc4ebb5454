"""
Group Access service for the LDAP Group Access layer.
"""

import sys
import os
from typing import Optional

# Add shared directory to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import SettingNotFoundError

from .access.mapper import GroupAccessMapper
from .access.models import AccessResolveRequest, AccessResolveResponse, Principal
from .bootstrap import build_registry
from .settings.formatter import format_setting_value
from .settings.models import (
    Setting, SettingListResponse, SettingModifyRequest, SettingResponse
)
from .settings.mutation import MutationMode, SettingsMutator
from .settings.registry import SettingsRegistry


def _to_response(setting: Setting) -> SettingResponse:
    return SettingResponse(
        name=setting.name,
        title=setting.title,
        type=setting.type,
        value=setting.get_value(),
        formatted_value=format_setting_value(setting),
        default_value=setting.default_value,
        description=setting.description,
        available_values=setting.available_values
    )


class GroupAccessService(BaseService):
    """Group access service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, registry: Optional[SettingsRegistry] = None):
        super().__init__("group_access", 8020, config=config)

        self.registry = registry or build_registry(self.config)
        self.mapper = GroupAccessMapper(self.registry)
        self.mutator = SettingsMutator(self.registry)

        self._setup_group_access_routes()

    def _setup_group_access_routes(self):
        """Set up group access specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "group_access",
                "message": "LDAP Group Access - Group Access Service",
                "version": "1.0.0",
                "modes": [mode.value for mode in MutationMode]
            }

        @self.app.get("/settings", response_model=SettingListResponse)
        async def list_settings():
            """List all settings in creation order."""
            settings = [_to_response(s) for s in self.registry.get_all_settings()]
            return SettingListResponse(settings=settings, total=len(settings))

        @self.app.get("/settings/{setting_name}", response_model=SettingResponse)
        async def get_setting(setting_name: str):
            """Get a single setting."""
            setting = self.registry.get_setting(setting_name)
            if setting is None:
                raise SettingNotFoundError(setting_name)
            return _to_response(setting)

        @self.app.post("/settings/{setting_name}", response_model=SettingResponse)
        async def modify_setting(setting_name: str, request: SettingModifyRequest):
            """Apply add/set/remove/reset to a setting and persist it."""
            setting = self.mutator.apply_and_save(setting_name, request.mode, request.values)
            return _to_response(setting)

        @self.app.post("/access/resolve", response_model=AccessResolveResponse)
        async def resolve_access(request: AccessResolveRequest):
            """Resolve the access granted by a set of directory groups."""
            grant = self.mapper.resolve(Principal.from_groups(request.groups))
            return AccessResolveResponse(enabled=self.mapper.enabled, access=grant.to_dict())

    def _check_dependencies(self):
        """Report the state of the directory group cache."""
        return {
            "directory_groups": "unavailable" if self.registry.group_catalog.failed else "ok",
            "group_count": len(self.registry.group_catalog.get()),
            "sites": len(self.registry.sites)
        }


def create_app(config: Optional[ServiceConfig] = None, registry: Optional[SettingsRegistry] = None):
    """Create group access service application."""
    service = GroupAccessService(config=config, registry=registry)
    return service.app


if __name__ == "__main__":
    service = GroupAccessService(get_config("group_access", 8020))
    service.run()
