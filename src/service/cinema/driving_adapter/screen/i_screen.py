"""
Screen capability interface

Presentation components implement open/close/render directly; there is no shared
base class. render() returns a plain view-model dict for whatever draws the screen.
"""

from typing import Any, Protocol


class IScreen(Protocol):
    @property
    def is_open(self) -> bool: ...

    def open(self) -> None:
        """Start listening to booking changes"""
        ...

    def close(self) -> None:
        """Stop listening to booking changes. Safe to call when already closed."""
        ...

    def render(self) -> dict[str, Any]: ...
