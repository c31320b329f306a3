"""Organization-wide packaging permissions."""

from __future__ import annotations

from typing import List, Optional, Sequence

from AdoRest.Core.client import SubClient

from .models import GlobalPermission

__all__ = ["ServiceSettingsClient"]


class ServiceSettingsClient(SubClient):
    """Who may create feeds in an organization."""

    def get_global_permissions(
        self, organization: str, *, include_ids: Optional[bool] = None
    ) -> List[GlobalPermission]:
        return (
            self._operation("GET", "packaging/globalpermissions", organization)
            .query("includeIds", include_ids)
            .into_list(GlobalPermission)
        )

    def set_global_permissions(
        self, organization: str, permissions: Sequence[GlobalPermission]
    ) -> List[GlobalPermission]:
        return (
            self._operation("PATCH", "packaging/globalpermissions", organization)
            .json(list(permissions))
            .into_list(GlobalPermission)
        )
