from abc import ABC, abstractmethod
from typing import Optional

from .address import StorageAddress


def strip_line_separator(content: str) -> str:
    """Drop exactly one trailing line separator, if present."""
    if content.endswith("\r\n"):
        return content[:-2]
    if content.endswith("\n"):
        return content[:-1]
    return content


class StorageBackend(ABC):
    """
    Base storage interface for a single payload slot.

    Implementations recover from their own failures: `write` reports success
    as a bool and `read` returns None when nothing usable is stored.
    """

    name = "backend"

    @abstractmethod
    def write(self, address: StorageAddress, data: str) -> bool:
        pass

    @abstractmethod
    def read(self, address: StorageAddress) -> Optional[str]:
        pass

    def describe(self, address: StorageAddress) -> dict:
        """Metadata about what is stored at `address`, without reading it."""
        return {}

    def __repr__(self):
        return f"<{self.__class__.__name__}>"
