"""
Editing Surface Protocol.

The rendering side of whatever widget hosts the editor. The controller only
pushes a loaded note into it; edits flow the other way through the
controller's on_* callbacks.
"""

from typing import Protocol


class EditorSurface(Protocol):
    def show_note(self, title: str, content: str) -> None:
        """Replace the displayed title and markup."""
        ...

    def clear(self) -> None:
        """Show an empty editor (no note selected)."""
        ...
