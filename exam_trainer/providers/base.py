from __future__ import annotations

from abc import ABC, abstractmethod


class DatasetProvider(ABC):
    """Read-only source of curated JSON resources, addressed by name."""

    @abstractmethod
    async def fetch(self, name: str) -> object:
        """Return the decoded JSON for resource *name*; raise on any failure."""
        ...

    @abstractmethod
    def name(self) -> str:
        ...
