"""Provenance sessions used when publishing packages from a pipeline."""

from __future__ import annotations

from typing import Optional

from AdoRest.Core.client import SubClient

from .models import SessionRequest, SessionResponse

__all__ = ["ProvenanceClient"]


class ProvenanceClient(SubClient):
    def create_session(
        self,
        organization: str,
        protocol: str,
        request: SessionRequest,
        *,
        project: Optional[str] = None,
    ) -> SessionResponse:
        """Open a provenance session for ``protocol`` (e.g. ``nuget``)."""

        return (
            self._operation(
                "POST",
                "provenance/session/{protocol}",
                organization,
                project,
                expected=(200, 201),
                protocol=protocol,
            )
            .json(request)
            .into(SessionResponse)
        )
