"""Pytest configuration for test environment setup.

- Forces ``DISABLE_FILE_LOGS=1`` to avoid writing log files during tests.
- Ensures the project root is available on ``sys.path`` for imports.
- Applies a per-test ``SIGALRM`` timeout where the platform supports it.
- Provides fake Playwright browser objects and small card PDFs.
"""

import os
import signal
import sys

os.environ.setdefault("DISABLE_FILE_LOGS", "1")  # Avoid creating log files during tests
from pathlib import Path

import pytest

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

_TEST_TIMEOUT = int(os.environ.get("PYTEST_TEST_TIMEOUT", "20"))


def _timeout_handler(signum, frame):
    """Test Timeout handler."""
    raise TimeoutError(f"Test exceeded {_TEST_TIMEOUT} seconds timeout")


def pytest_runtest_setup(item):
    """Test Pytest runtest setup."""
    try:
        signal.signal(signal.SIGALRM, _timeout_handler)
        signal.alarm(_TEST_TIMEOUT)
    except Exception:
        pass


def pytest_runtest_teardown(item, nextitem):
    """Test Pytest runtest teardown."""
    try:
        signal.alarm(0)
    except Exception:
        pass


class FakePage:
    """Stand-in for a Playwright page; ``pdf()`` writes a tiny file."""

    def __init__(self, browser, viewport):
        self.browser = browser
        self.viewport = viewport
        self.html = None
        self.closed = False

    async def set_content(self, html, wait_until=None, timeout=None):
        self.html = html
        self.browser.contents.append(html)

    async def pdf(self, path, width, height, print_background):
        if self.browser.fail_on is not None and self.browser.fail_on in (self.html or ""):
            Path(path).write_bytes(b"%PDF-partial")
            raise RuntimeError("page crashed")
        self.browser.pdf_calls.append((path, width, height, print_background))
        Path(path).write_bytes(b"%PDF-1.4\n% fake card\n")

    async def close(self):
        self.closed = True
        self.browser.open_pages -= 1
        if self.browser.fail_close:
            raise RuntimeError("Target page, context or browser has been closed")


class FakeBrowser:
    """Stand-in for a launched Playwright browser.

    ``fail_on`` makes any page whose HTML contains that text fail in ``pdf()``;
    ``fail_close`` makes every ``close()`` raise, as after a browser crash.
    """

    def __init__(self, fail_on=None, fail_close=False):
        self.fail_on = fail_on
        self.fail_close = fail_close
        self.pages = []
        self.contents = []
        self.pdf_calls = []
        self.open_pages = 0
        self.max_open_pages = 0

    async def new_page(self, viewport=None):
        page = FakePage(self, viewport)
        self.pages.append(page)
        self.open_pages += 1
        self.max_open_pages = max(self.max_open_pages, self.open_pages)
        return page


@pytest.fixture
def fake_browser():
    return FakeBrowser()


@pytest.fixture
def assets(tmp_path: Path):
    """Template and logo directories with one simple template per type."""
    template_dir = tmp_path / "templates"
    logo_dir = tmp_path / "logos"
    template_dir.mkdir()
    logo_dir.mkdir()
    for type_tag in ("promocao", "cupom", "queda", "bc"):
        (template_dir / f"{type_tag}.html").write_text(
            f"<div class='{type_tag}'><img src='{{{{LOGO}}}}'>"
            "<b>{{VALOR}}</b><p>{{TEXTO}}</p><i>{{CUPOM}}</i>"
            "<small>{{LEGAL}} {{UF}} {{SEGMENTO}}</small></div>",
            encoding="utf-8",
        )
    (logo_dir / "blank.png").write_bytes(b"\x89PNG\r\n\x1a\nblank")
    (logo_dir / "acme.png").write_bytes(b"\x89PNG\r\n\x1a\nacme")
    return template_dir, logo_dir


def write_card_pdf(path: Path, label: str = "card", size=(1050, 1586.25)) -> Path:
    """Write a one-page PDF the shape of a rendered card."""
    from reportlab.pdfgen import canvas

    canv = canvas.Canvas(str(path), pagesize=size)
    canv.drawString(20, 20, label)
    canv.showPage()
    canv.save()
    return path


@pytest.fixture
def card_pdf_factory(tmp_path: Path):
    """Create card PDFs by filename inside ``tmp_path / 'work'``."""
    work = tmp_path / "work"
    work.mkdir(exist_ok=True)

    def make(*names: str) -> Path:
        for name in names:
            write_card_pdf(work / name, label=name)
        return work

    return make


@pytest.fixture
def browser_factory():
    return FakeBrowser
