import unicodedata

from sqlalchemy import String, func
from sqlalchemy.sql.elements import ColumnElement


def _build_accent_folds() -> dict:
    """Map each Latin-1 letter to its lower-case form without accents."""
    folds = {}
    for code in range(0xC0, 0x100):
        char = chr(code)
        decomposed = unicodedata.normalize("NFD", char)
        plain = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()
        if plain != char:
            folds[char] = plain
    return folds


# Shared by both sides of a name search, e.g. "Ñ" -> "n", "è" -> "e", "Æ" -> "æ"
ACCENT_FOLDS = _build_accent_folds()


def fold_text(text: str) -> str:
    """
    Fold a search term exactly as fold_column folds a name: replace
    accented Latin-1 letters, then lower-case ASCII only.
    """
    text = unicodedata.normalize("NFC", text)
    return "".join(
        ACCENT_FOLDS.get(ch, ch.lower() if ch.isascii() else ch) for ch in text
    )


def fold_column(column) -> ColumnElement:
    """
    SQL expression folding a text column the same way fold_text folds a term.

    SQLite's lower() only handles ASCII, so accented letters are replaced
    before lowering.
    """
    expression = column
    for accented, plain in ACCENT_FOLDS.items():
        expression = func.replace(expression, accented, plain, type_=String)
    return func.lower(expression, type_=String)
