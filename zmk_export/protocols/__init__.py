"""Protocol definitions for injected collaborators."""

from .usage_protocols import KeyNameResolver, UsageTableProtocol


__all__ = ["KeyNameResolver", "UsageTableProtocol"]
