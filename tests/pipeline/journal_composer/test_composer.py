"""Tests for JournalComposer on real single-card PDFs."""

import asyncio
import logging
from pathlib import Path
from types import SimpleNamespace

import pytest
from pypdf import PdfReader

from src.exceptions import CompositionError, CompositionInputError
from src.pipeline.card_renderer.normalizer import CanonicalRecord
from src.pipeline.card_renderer.renderer import CardRenderer
from src.pipeline.journal_composer import composer as composer_mod
from src.pipeline.journal_composer import runner
from src.pipeline.journal_composer.composer import JournalComposer, fit_transformation
from src.pipeline.journal_composer.layout import Rect


def _cfg(**overrides):
    base = dict(
        cards_per_page=15,
        columns=3,
        card_width=400.0,
        gap=20.0,
        margin=40.0,
        banner_height=90.0,
        color_seed=3,
        color_strategy="random",
        font_path=None,
        include_category_in_filename=True,
        output_filename="journal.pdf",
    )
    base.update(overrides)
    return SimpleNamespace(**base)


@pytest.fixture
def banner_calls(monkeypatch):
    calls = []
    real = composer_mod.render_banner_overlay

    def recording(category, color, geometry, page_height, font_name):
        calls.append((category, color))
        return real(category, color, geometry, page_height, font_name)

    monkeypatch.setattr(composer_mod, "render_banner_overlay", recording)
    return calls


def test_two_categories_two_pages_distinct_colors(card_pdf_factory, banner_calls):
    work = card_pdf_factory("1_PROMOCAO_A.pdf", "2_CUPOM_A.pdf", "3_QUEDA_B.pdf")
    composer = JournalComposer(_cfg())
    out = composer.compose(work)

    assert out == work / "journal.pdf"
    reader = PdfReader(out)
    assert len(reader.pages) == 2
    assert [c for c, _ in banner_calls] == ["A", "B"]
    assert banner_calls[0][1] != banner_calls[1][1]
    geo = composer.geometry()
    assert float(reader.pages[0].mediabox.height) == pytest.approx(geo.page_height(1))
    assert float(reader.pages[0].mediabox.width) == pytest.approx(geo.page_width)


def test_large_category_splits_and_keeps_color(card_pdf_factory, banner_calls):
    names = [f"{i}_BC_BIG.pdf" for i in range(1, 21)]
    work = card_pdf_factory(*names)
    out = JournalComposer(_cfg()).compose(work)
    reader = PdfReader(out)
    assert len(reader.pages) == 2
    assert [c for c, _ in banner_calls] == ["BIG", "BIG"]
    assert banner_calls[0][1] == banner_calls[1][1]
    geo = JournalComposer(_cfg()).geometry()
    assert float(reader.pages[0].mediabox.height) == pytest.approx(geo.page_height(5))
    assert float(reader.pages[1].mediabox.height) == pytest.approx(geo.page_height(2))


def test_small_category_single_page(card_pdf_factory):
    work = card_pdf_factory("1_CUPOM_X.pdf", "2_CUPOM_X.pdf")
    out = JournalComposer(_cfg()).compose(work, work / "sub" / "j.pdf")
    assert out == work / "sub" / "j.pdf"
    assert len(PdfReader(out).pages) == 1


def test_interleaved_categories_are_not_merged(card_pdf_factory, banner_calls):
    work = card_pdf_factory("1_BC_A.pdf", "2_BC_B.pdf", "3_BC_A.pdf")
    pages = JournalComposer(_cfg()).plan(work)
    assert [(p.category, [c.order for c in p.cards]) for p in pages] == [
        ("A", ["1"]),
        ("B", ["2"]),
        ("A", ["3"]),
    ]
    JournalComposer(_cfg()).compose(work)
    colors = [color for _, color in banner_calls]
    assert colors[0] == colors[2] != colors[1]


def test_numeric_order_across_digits(card_pdf_factory):
    work = card_pdf_factory("10_BC_A.pdf", "9_BC_A.pdf", "1_BC_A.pdf")
    pages = JournalComposer(_cfg()).plan(work)
    assert [c.order for c in pages[0].cards] == ["1", "9", "10"]


def test_empty_directory_writes_nothing(tmp_path: Path):
    work = tmp_path / "empty"
    work.mkdir()
    with pytest.raises(CompositionInputError) as exc:
        JournalComposer(_cfg()).compose(work)
    assert "no cards found" in exc.value.message
    assert list(work.iterdir()) == []


def test_corrupt_card_is_input_error(card_pdf_factory):
    work = card_pdf_factory("1_BC_A.pdf")
    (work / "2_BC_A.pdf").write_bytes(b"garbage")
    with pytest.raises(CompositionInputError):
        JournalComposer(_cfg()).compose(work)
    assert not (work / "journal.pdf").exists()
    assert not (work / "journal.pdf.part").exists()


def test_unwritable_output_is_composition_error(card_pdf_factory):
    work = card_pdf_factory("1_BC_A.pdf")
    blocker = work / "blocker"
    blocker.write_text("file, not a dir", encoding="utf-8")
    with pytest.raises(CompositionError):
        JournalComposer(_cfg()).compose(work, blocker / "journal.pdf")


def test_filenames_without_category(card_pdf_factory):
    work = card_pdf_factory("1_BC.pdf", "2_CUPOM.pdf")
    pages = JournalComposer(_cfg(include_category_in_filename=False)).plan(work)
    assert len(pages) == 1
    assert pages[0].category == "UNCATEGORIZED"


def test_fit_transformation_centres_card():
    from pypdf import PageObject

    source = PageObject.create_blank_page(width=100, height=200)
    matrix = fit_transformation(source, Rect(10, 20, 100, 100)).ctm
    scale, _, _, scale_y, offset_x, offset_y = matrix
    assert scale == pytest.approx(0.5)
    assert scale_y == pytest.approx(0.5)
    assert offset_x == pytest.approx(10 + 25)
    assert offset_y == pytest.approx(20)


def test_runner_run_from_config(card_pdf_factory, monkeypatch, caplog):
    work = card_pdf_factory("1_BC_A.pdf")
    monkeypatch.setattr(runner, "JournalComposer", lambda config=None: JournalComposer(_cfg()))
    assert runner.run_from_config(work) is True
    assert (work / "journal.pdf").exists()
    with caplog.at_level(logging.ERROR):
        assert runner.run_from_config(work / "missing") is False
    assert "Failed to compose journal" in caplog.text


def test_rows_sharing_an_order_keep_row_sequence(tmp_path: Path, assets, fake_browser):
    template_dir, logo_dir = assets
    work = tmp_path / "rendered"
    render_cfg = SimpleNamespace(
        card_width=1400,
        card_height=2115,
        include_category_in_filename=True,
        max_concurrent_pages=1,
        navigation_timeout_ms=1000,
    )
    records = [
        CanonicalRecord("1", "cupom", "A", row, {"logo": "blank.png", "text": f"row {row}"})
        for row in (1, 2)
    ]
    renderer = CardRenderer(render_cfg, template_dir, logo_dir, work)
    cards = asyncio.run(renderer.render_all(records, browser=fake_browser))
    assert [c.filename for c in cards] == ["1_CUPOM_A.pdf", "1-2_CUPOM_A.pdf"]

    pages = JournalComposer(_cfg()).plan(work)
    assert [c.path.name for c in pages[0].cards] == ["1_CUPOM_A.pdf", "1-2_CUPOM_A.pdf"]
