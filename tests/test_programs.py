"""Tests for the two command-line entrypoints."""

from pathlib import Path

import src.program1_generate_cards as program1
import src.program2_compose_journal as program2
from src.exceptions import UserInputError
from src.pipeline.card_renderer.renderer import RenderProgress
from src.pipeline.card_renderer.runner import GenerationResult


def test_program1_main_success(tmp_path: Path, monkeypatch, capsys):
    seen = {}

    def fake_generate(spreadsheet, working_dir, template_dir, logo_dir, on_progress=None):
        seen["working_dir"] = working_dir
        on_progress(RenderProgress.from_counts(1, 2))
        on_progress(RenderProgress.from_counts(2, 2))
        return GenerationResult(cards=[], dropped=[], archive_path=working_dir / "a.zip")

    monkeypatch.setattr(program1, "generate_cards", fake_generate)
    code = program1.main(["--input", str(tmp_path / "c.csv"), "--working-dir", str(tmp_path)])
    assert code == 0
    assert seen["working_dir"] == tmp_path
    assert "Rendered 0 cards" in capsys.readouterr().out


def test_program1_main_session_dir(tmp_path: Path, monkeypatch):
    seen = {}

    class Store:
        def reset(self, session_id):
            seen["session"] = session_id
            return tmp_path / session_id

    def fake_generate(spreadsheet, working_dir, template_dir, logo_dir, on_progress=None):
        seen["working_dir"] = working_dir
        return GenerationResult(cards=[], dropped=[], archive_path=working_dir / "a.zip")

    monkeypatch.setattr(program1, "SessionStore", Store)
    monkeypatch.setattr(program1, "generate_cards", fake_generate)
    assert program1.main(["--input", "c.csv", "--session", "abc"]) == 0
    assert seen == {"session": "abc", "working_dir": tmp_path / "abc"}


def test_program1_main_failure(monkeypatch):
    def boom(*a, **k):
        raise UserInputError("Spreadsheet not found: c.csv")

    monkeypatch.setattr(program1, "generate_cards", boom)
    assert program1.main(["--input", "c.csv"]) == 1


def test_program1_main_invalid_session_id(monkeypatch):
    def never_called(*a, **k):
        raise AssertionError("generate_cards must not run")

    monkeypatch.setattr(program1, "generate_cards", never_called)
    assert program1.main(["--input", "x.csv", "--session", "../etc"]) == 1


def test_program1_main_corrupt_workbook(tmp_path: Path):
    bad = tmp_path / "cards.xlsx"
    bad.write_bytes(b"not a workbook at all")
    code = program1.main(["--input", str(bad), "--working-dir", str(tmp_path / "w")])
    assert code == 1


def test_program2_main(tmp_path: Path, monkeypatch, capsys):
    seen = {}

    def fake_compose(working_dir, output_file, config):
        seen["cards_per_page"] = config.cards_per_page
        return working_dir / "journal.pdf"

    monkeypatch.setattr(program2, "compose_journal", fake_compose)
    code = program2.main(["--working-dir", str(tmp_path), "--cards-per-page", "6"])
    assert code == 0
    assert seen["cards_per_page"] == 6
    assert str(tmp_path / "journal.pdf") in capsys.readouterr().out


def test_program2_main_empty_dir(tmp_path: Path):
    assert program2.main(["--working-dir", str(tmp_path)]) == 1
