"""
Save Status.

Immutable snapshot of what the editor shows next to the note: whether a
save is running, when the last one succeeded, and the word count.
"""

from dataclasses import dataclass
from datetime import datetime

from modules.backend.core.utils import to_local_time_label
from modules.backend.schemas.note import NoteResponse


def count_words(plain_text: str) -> int:
    """Number of whitespace-separated words in `plain_text`."""
    return len(plain_text.split())


@dataclass(frozen=True)
class SaveStatus:
    """
    Observational save state for display.

    The controller replaces the whole snapshot on every change, so a
    reference held by a caller never changes under it.
    """

    is_saving: bool = False
    last_saved_at: datetime | None = None
    last_saved_note: NoteResponse | None = None
    word_count: int = 0

    def label(self) -> str:
        if self.is_saving:
            return "Saving..."
        if self.last_saved_at is not None:
            return f"Saved at {to_local_time_label(self.last_saved_at)}"
        return ""

    def word_label(self) -> str:
        if self.word_count == 0:
            return ""
        return f"{self.word_count} {'word' if self.word_count == 1 else 'words'}"
