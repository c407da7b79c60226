"""Protocol definitions for HID usage lookups."""

from collections.abc import Callable
from typing import Protocol, TypeAlias, runtime_checkable


@runtime_checkable
class UsageTableProtocol(Protocol):
    """Protocol for a HID usage-name database."""

    def decode(self, usage_code: int) -> tuple[int, int]:
        """Split a usage code into its (page, id) pair."""
        ...

    def get_label(self, page: int, usage_id: int) -> str | None:
        """Get the human-readable label of a usage, or None if unknown."""
        ...


# Maps a usage code to a ZMK key name, None when unresolvable
KeyNameResolver: TypeAlias = Callable[[int], str | None]
