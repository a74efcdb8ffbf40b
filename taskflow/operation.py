"""Operations that a flow node executes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional


class Operation(ABC):
    """A unit of work applied to a node's data."""

    @abstractmethod
    def get_id(self) -> str:
        """Return the operation's name."""

    @abstractmethod
    def encode(self) -> bytes:
        """Return the operation's serialised form."""

    @abstractmethod
    def get_properties(self) -> dict[str, list[str]]:
        """Return the operation's properties."""

    @abstractmethod
    def execute(self, data: bytes, options: Optional[Mapping[str, Any]] = None) -> bytes:
        """Run the operation on ``data`` with executor ``options``."""


class BlankOperation(Operation):
    """An operation that passes its input through unchanged."""

    def get_id(self) -> str:
        return "end"

    def encode(self) -> bytes:
        return b""

    def get_properties(self) -> dict[str, list[str]]:
        return {}

    def execute(self, data: bytes, options: Optional[Mapping[str, Any]] = None) -> bytes:
        """Return a copy of ``data`` as bytes; ``options`` are ignored."""
        return bytes(data)