"""Tests for environment-backed render and journal settings."""

import pytest

import src.config as project_config
from src.exceptions import ConfigurationError
from src.pipeline.card_renderer.config import RenderConfig, env_flag
from src.pipeline.journal_composer.config import JournalConfig


@pytest.fixture(autouse=True)
def _no_project_env(monkeypatch, tmp_path):
    monkeypatch.setattr(project_config, "PROJECT_ROOT", tmp_path)
    for name in (
        "CARD_WIDTH",
        "CARD_HEIGHT",
        "MAX_CONCURRENT_PAGES",
        "NAVIGATION_TIMEOUT_MS",
        "INCLUDE_CATEGORY_IN_FILENAME",
        "CARDS_PER_PAGE",
        "COLOR_SEED",
        "COLOR_STRATEGY",
        "BANNER_FONT_PATH",
        "JOURNAL_FILENAME",
    ):
        monkeypatch.delenv(name, raising=False)


def test_render_config_defaults():
    cfg = RenderConfig()
    assert (cfg.card_width, cfg.card_height) == (1400, 2115)
    assert cfg.max_concurrent_pages == 1
    assert cfg.include_category_in_filename is True


def test_render_config_from_env(monkeypatch):
    monkeypatch.setenv("MAX_CONCURRENT_PAGES", "4")
    monkeypatch.setenv("INCLUDE_CATEGORY_IN_FILENAME", "no")
    cfg = RenderConfig()
    assert cfg.max_concurrent_pages == 4
    assert cfg.include_category_in_filename is False


@pytest.mark.parametrize("value", ["abc", "0", "-2"])
def test_render_config_rejects_bad_values(monkeypatch, value):
    monkeypatch.setenv("MAX_CONCURRENT_PAGES", value)
    with pytest.raises(ConfigurationError):
        RenderConfig()


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    # registered so the values loaded from .env are removed afterwards
    monkeypatch.setenv("CARDS_PER_PAGE", "1")
    monkeypatch.setenv("COLOR_SEED", "1")
    (tmp_path / ".env").write_text("CARDS_PER_PAGE=6\nCOLOR_SEED=42\n", encoding="utf-8")
    cfg = JournalConfig()
    assert cfg.cards_per_page == 6
    assert cfg.color_seed == 42


def test_journal_config_defaults_and_validation(monkeypatch):
    cfg = JournalConfig()
    assert cfg.cards_per_page == 15
    assert cfg.color_seed is None
    assert cfg.output_filename == "journal.pdf"
    monkeypatch.setenv("CARDS_PER_PAGE", "0")
    with pytest.raises(ConfigurationError):
        JournalConfig()


def test_env_flag(monkeypatch):
    monkeypatch.setenv("X_FLAG", " ")
    assert env_flag("X_FLAG", True) is True
    monkeypatch.setenv("X_FLAG", "On")
    assert env_flag("X_FLAG", False) is True
