"""CardRenderer: render canonical records into single-card PDF documents.

Each record is turned into HTML by filling its type's template, loaded into a
headless Chromium page through Playwright, and printed as a fixed-size
single-page PDF into the working directory. Files are written under a
temporary ``.part`` name and renamed once complete, so a card file either
exists in full or not at all.

Failure policy
--------------
- A record whose template or logo file is missing is logged and skipped
  before rendering starts; it does not count towards the progress total.
- Any browser failure raises :class:`~src.exceptions.RenderError` and aborts
  the remaining batch. Cards already written stay in place.

Examples
--------
>>> import asyncio
>>> from pathlib import Path
>>> from src.pipeline.card_renderer.config import RenderConfig
>>> renderer = CardRenderer(RenderConfig(), Path("templates"), Path("logos"), Path("output"))
>>> # cards = asyncio.run(renderer.render_all(records, on_progress=print))
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from playwright.async_api import async_playwright

from src.config import BLANK_LOGO_FILENAME, BROWSER_LAUNCH_ARGS, PARTIAL_FILE_SUFFIX
from src.exceptions import AppError, ConfigurationError, RenderError, RowSkippedError

from .filenames import encode_card_filename
from .normalizer import CanonicalRecord
from .templating import (
    build_card_context,
    load_template,
    logo_data_uri,
    render_template,
    template_path_for,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderProgress:
    """Progress snapshot emitted after each card is written."""

    total: int
    processed: int
    percentage: int
    current_card: str

    @classmethod
    def from_counts(cls, processed: int, total: int) -> RenderProgress:
        percentage = round(processed / total * 100) if total else 100
        return cls(total, processed, percentage, f"{processed}/{total}")

    def to_dict(self) -> dict[str, Any]:
        """Return the payload shape used by progress channels."""
        return {
            "total": self.total,
            "processed": self.processed,
            "percentage": self.percentage,
            "currentCard": self.current_card,
        }


@dataclass(frozen=True)
class RenderedCard:
    """A single-card PDF written to the working directory."""

    order: str
    type_tag: str
    category: str
    filename: str
    path: Path
    width: int
    height: int


@dataclass(frozen=True)
class CardJob:
    """A record with its filled HTML, ready for the browser."""

    record: CanonicalRecord
    filename: str
    html: str


ProgressCallback = Callable[[RenderProgress], None]


class CardRenderer:
    """Render card records to PDF files with a headless browser.

    Parameters
    ----------
    config : Any
        Object exposing ``card_width``, ``card_height``,
        ``include_category_in_filename``, ``max_concurrent_pages`` and
        ``navigation_timeout_ms`` (see :class:`RenderConfig`).
    template_dir : Path
        Directory holding one ``<type>.html`` template per card type.
    logo_dir : Path
        Directory holding logo images, including the blank fallback.
    output_dir : Path
        Working directory receiving the card PDFs.
    """

    def __init__(
        self, config: Any, template_dir: Path, logo_dir: Path, output_dir: Path
    ) -> None:
        self.config = config
        self.template_dir = Path(template_dir)
        self.logo_dir = Path(logo_dir)
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._templates: dict[str, str] = {}

    def _template_for(self, type_tag: str) -> str:
        if type_tag not in self._templates:
            path = template_path_for(type_tag, self.template_dir)
            if not path.exists():
                raise RowSkippedError(
                    f"missing template {path.name}", context={"type": type_tag}
                )
            try:
                self._templates[type_tag] = load_template(path)
            except OSError as exc:
                raise RenderError(
                    f"Cannot read template {path}: {exc}", context={"type": type_tag}
                ) from exc
        return self._templates[type_tag]

    def _logo_path(self, record: CanonicalRecord) -> Path:
        path = self.logo_dir / record.get("logo")
        if not path.is_file():
            raise RowSkippedError(
                f"missing logo {record.get('logo')!r}",
                context={"row": record.row_number},
            )
        return path

    def prepare_cards(self, records: Iterable[CanonicalRecord]) -> list[CardJob]:
        """Fill templates for every renderable record.

        Records with a missing template or logo are logged and skipped.
        Filenames that would collide within the batch get a ``-<n>`` suffix
        on the order token so every record keeps its own file.

        Raises
        ------
        ConfigurationError
            If the blank fallback logo is missing.
        RenderError
            If a template exists but cannot be read.
        """
        if not (self.logo_dir / BLANK_LOGO_FILENAME).is_file():
            raise ConfigurationError(
                f"Fallback logo {BLANK_LOGO_FILENAME} not found in {self.logo_dir}"
            )
        include_category = bool(
            getattr(self.config, "include_category_in_filename", True)
        )
        jobs: list[CardJob] = []
        used_names: set[str] = set()
        for record in records:
            try:
                template = self._template_for(record.type_tag)
                logo_uri = logo_data_uri(self._logo_path(record))
            except RowSkippedError as exc:
                logger.warning(f"Row {record.row_number}: {exc.message}, skipping.")
                continue
            order = record.order
            filename = encode_card_filename(
                order, record.type_tag, record.category, include_category=include_category
            )
            suffix = 2
            while filename in used_names:
                order = f"{record.order}-{suffix}"
                filename = encode_card_filename(
                    order,
                    record.type_tag,
                    record.category,
                    include_category=include_category,
                )
                suffix += 1
            if order != record.order:
                logger.warning(
                    f"Row {record.row_number}: duplicate card name, writing {filename}"
                )
            used_names.add(filename)
            html = render_template(template, build_card_context(record, logo_uri))
            jobs.append(CardJob(record=record, filename=filename, html=html))
        return jobs

    async def render_all(
        self,
        records: Iterable[CanonicalRecord],
        on_progress: ProgressCallback | None = None,
        browser: Any = None,
    ) -> list[RenderedCard]:
        """Render every renderable record and return the written cards.

        Parameters
        ----------
        records : Iterable[CanonicalRecord]
            Normalized records in input order.
        on_progress : ProgressCallback or None, optional
            Called once per written card, in strictly increasing
            ``processed`` order.
        browser : Any, optional
            An already launched Playwright browser. When omitted a headless
            Chromium is launched and closed around the batch.

        Returns
        -------
        list[RenderedCard]
            Written cards in input order.

        Raises
        ------
        RenderError
            If the browser fails; the remaining batch is aborted.
        """
        jobs = self.prepare_cards(records)
        if not jobs:
            logger.warning("No renderable cards in batch")
            return []
        if browser is not None:
            return await self._render_jobs(browser, jobs, on_progress)
        try:
            async with async_playwright() as playwright:
                launched = await playwright.chromium.launch(
                    headless=True, args=BROWSER_LAUNCH_ARGS
                )
                try:
                    return await self._render_jobs(launched, jobs, on_progress)
                finally:
                    await launched.close()
        except AppError:
            raise
        except Exception as exc:
            raise RenderError(f"Headless browser failure: {exc}") from exc

    async def _render_jobs(
        self,
        browser: Any,
        jobs: list[CardJob],
        on_progress: ProgressCallback | None,
    ) -> list[RenderedCard]:
        total = len(jobs)
        semaphore = asyncio.Semaphore(
            int(getattr(self.config, "max_concurrent_pages", 1))
        )
        results: dict[int, RenderedCard] = {}
        processed = 0
        aborted = asyncio.Event()

        async def run(index: int, job: CardJob) -> None:
            nonlocal processed
            async with semaphore:
                if aborted.is_set():
                    return
                try:
                    card = await self._render_card(browser, job)
                except BaseException:
                    aborted.set()
                    raise
            # single event loop: increments and callbacks are serialized
            processed += 1
            results[index] = card
            progress = RenderProgress.from_counts(processed, total)
            logger.info(
                f"Rendered {card.filename} ({progress.current_card}, {progress.percentage}%)"
            )
            if on_progress is not None:
                on_progress(progress)

        tasks = [asyncio.create_task(run(i, job)) for i, job in enumerate(jobs)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [results[i] for i in range(total)]

    async def _render_card(self, browser: Any, job: CardJob) -> RenderedCard:
        width = int(self.config.card_width)
        height = int(self.config.card_height)
        final_path = self.output_dir / job.filename
        partial_path = final_path.with_name(final_path.name + PARTIAL_FILE_SUFFIX)
        try:
            page = await browser.new_page(viewport={"width": width, "height": height})
        except Exception as exc:
            raise RenderError(f"Cannot open browser page: {exc}") from exc
        try:
            await page.set_content(
                job.html,
                wait_until="networkidle",
                timeout=getattr(self.config, "navigation_timeout_ms", 30000),
            )
            await page.pdf(
                path=str(partial_path),
                width=f"{width}px",
                height=f"{height}px",
                print_background=True,
            )
            os.replace(partial_path, final_path)
        except asyncio.CancelledError:
            partial_path.unlink(missing_ok=True)
            raise
        except Exception as exc:
            partial_path.unlink(missing_ok=True)
            raise RenderError(
                f"Failed to render {job.filename}: {exc}",
                context={"row": job.record.row_number},
            ) from exc
        finally:
            try:
                await page.close()
            except Exception as exc:
                logger.warning(f"Could not close browser page for {job.filename}: {exc}")
        record = job.record
        return RenderedCard(
            order=record.order,
            type_tag=record.type_tag,
            category=record.category,
            filename=job.filename,
            path=final_path,
            width=width,
            height=height,
        )
