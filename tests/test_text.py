"""Tests for search folding helpers."""
import pytest
from sqlalchemy import literal, select

from pricetracker.utils.text import fold_column, fold_text


@pytest.mark.parametrize("text", [
    "Ñoquis", "Crème fraîche", "ÉLAN water", "Limón", "Çà et là", "Ærøskøbing", "Straße",
])
def test_sql_and_python_folding_agree(db_session, text):
    """Test a name folded in SQL equals the same text folded in Python."""
    folded = db_session.execute(select(fold_column(literal(text)))).scalar_one()

    assert folded == fold_text(text)


def test_fold_text():
    """Test accents are removed and ASCII is lower-cased."""
    assert fold_text("Crème Fraîche") == "creme fraiche"
    assert fold_text("ÑOQUIS") == "noquis"
