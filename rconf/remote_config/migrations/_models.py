from __future__ import annotations

from abc import ABC, abstractmethod

from rconf.core import DataModel


class VersionRange(DataModel):
    """Half-open range of schema versions ``[start, end)``."""

    start: int
    end: int

    @staticmethod
    def from_integer_version(version: int) -> VersionRange:
        return VersionRange(start=version, end=version + 1)

    def contains(self, version: int) -> bool:
        return self.start <= version < self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end})"


class SchemaMigration(ABC):
    """Pure transformation of a serialized document to ``version``.

    ``migrate`` receives a private copy of the document and returns
    the upgraded document. It never records migration history.
    """

    @property
    @abstractmethod
    def range(self) -> VersionRange:
        """Source versions this migration accepts."""

    @property
    @abstractmethod
    def version(self) -> int:
        """Version of the produced document."""

    @abstractmethod
    def migrate(self, source: dict) -> dict:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.range} -> {self.version})"
