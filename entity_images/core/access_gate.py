"""
Access gate for images protected by an authorization oracle.

The engine never decides access itself: schemas with the gate enabled
ask an external oracle whether the current subject may see an entity's
image, and serve the blurred variant otherwise.

Dependencies: None (pure domain layer)
System role: Boundary to the external authorization oracle
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

IMAGE_ATTRIBUTE = "image"


@runtime_checkable
class AccessGate(Protocol):
    """Yes/no authorization oracle."""

    def is_granted(self, attribute: str, subject: Any) -> bool:
        """Return True if the current user holds ``attribute`` on ``subject``."""
        ...


class StaticAccessGate:
    """Gate that answers the same for every subject."""

    def __init__(self, granted: bool) -> None:
        self.granted = granted

    def is_granted(self, attribute: str, subject: Any) -> bool:
        return self.granted


class CallableAccessGate:
    """Gate backed by a plain ``(attribute, subject) -> bool`` function."""

    def __init__(self, check: Callable[[str, Any], bool]) -> None:
        self.check = check

    def is_granted(self, attribute: str, subject: Any) -> bool:
        return bool(self.check(attribute, subject))
