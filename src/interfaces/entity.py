"""
Entity contract for repository-managed records.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class BaseEntity(Protocol):
    """Anything persisted through a repository exposes a unique ``id``."""

    id: Any
