"""
Title Derivation.

Computes a display title from a note's plain text. The result is only ever
used as the `title` field of a save; the text it reads is never modified.
"""

UNTITLED = "Untitled"
TITLE_MAX_LENGTH = 100


def derive_title(
    plain_text: str,
    *,
    max_length: int = TITLE_MAX_LENGTH,
    untitled: str = UNTITLED,
) -> str:
    """
    Return the first non-blank line of `plain_text`, stripped and cut to
    `max_length` characters, or `untitled` if there is no such line.

    Leading blank lines are skipped, so "\\n\\n  Groceries\\nmilk" gives
    "Groceries".
    """
    if not plain_text or not plain_text.strip():
        return untitled

    for line in plain_text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped[:max_length]

    return untitled


def is_placeholder_title(title: str | None, untitled: str = UNTITLED) -> bool:
    """True when `title` means "no title given": empty, blank, or exactly the sentinel."""
    if title is None or not title.strip():
        return True
    return title == untitled
