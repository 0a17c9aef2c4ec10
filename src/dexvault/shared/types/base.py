"""
Base Dataclasses for DexVault

Common dataclass base used by every record type.

Design Decisions:
- Dataclass over Pydantic for records: no runtime validation cost on the
  hot path, validation happens once in the ``from_api`` constructors
- Frozen where the record is shared through the cache
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class BaseDataclass:
    """Common base dataclass for all DexVault types."""

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict suitable for JSON serialization."""
        return asdict(self)
