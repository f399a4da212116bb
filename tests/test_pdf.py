"""Tests for PDF export."""

from datetime import datetime

import pytest

from expirygraph.models import FoodEntry
from expirygraph.pdf import generate_pdf
from expirygraph.tracker import build_rows, summarize

NOW = datetime(2024, 3, 5, 10, 0)


def _rows():
    entries = [
        FoodEntry.create("Milk", "2024-03-01"),
        FoodEntry.create("Eggs", "2024-03-05"),
        FoodEntry.create("Rice <brown> & wild", "12/2025"),
    ]
    return build_rows(entries, NOW)


@pytest.fixture(autouse=True)
def _require_reportlab():
    pytest.importorskip("reportlab")


class TestPDFGeneration:
    def test_generate_pdf_creates_file(self, tmp_path):
        rows = _rows()
        output = tmp_path / "report.pdf"
        result = generate_pdf(rows, summarize(rows), output, generated_at=NOW)

        assert result == output
        assert output.stat().st_size > 0
        with open(output, "rb") as f:
            assert f.read(4) == b"%PDF"

    def test_generate_pdf_creates_parent_dirs(self, tmp_path):
        rows = _rows()
        output = tmp_path / "sub" / "nested" / "report.pdf"
        generate_pdf(rows, summarize(rows), output)
        assert output.exists()

    def test_generate_pdf_empty(self, tmp_path):
        output = tmp_path / "empty.pdf"
        generate_pdf([], summarize([]), output)
        assert output.exists()
