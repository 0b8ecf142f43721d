from __future__ import annotations

from typing import Optional, Protocol

from .model import AdminSettings


class AdminSettingsRepository(Protocol):
    def get(self) -> Optional[AdminSettings]:
        raise NotImplementedError

    def save(self, settings: AdminSettings) -> None:
        """Upsert the singleton settings row."""

        raise NotImplementedError
