from __future__ import annotations

import asyncio
from dataclasses import dataclass

from loguru import logger

from slack_history_archive.archive_config import ArchiveConfig
from slack_history_archive.errors import TRANSIENT_ERRORS, ApiError, ArchiveError
from slack_history_archive.output_writer import OutputWriter
from slack_history_archive.page import Page
from slack_history_archive.page_fetcher import PageFetcher
from slack_history_archive.retry_policy import Sleep, build_retrying


@dataclass(frozen=True)
class ArchiveSummary:
    pages: int
    messages: int


class HistoryStreamer:
    """Walks the paginated history to the end and streams every message to a writer.

    Pages are fetched strictly one after another. A page's messages are only
    handed to the writer once the whole page has been fetched, so a failed or
    retried fetch never contributes partial output. Transient failures (rate
    limiting, transport) are retried with exponential backoff up to
    ``retry_ceiling`` times per page; the budget starts over after every
    successful page. API-level failures are fatal immediately.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        config: ArchiveConfig,
        *,
        sleep: Sleep = asyncio.sleep,
    ):
        self._fetcher = fetcher
        self._config = config
        self._sleep = sleep

    async def run(self, writer: OutputWriter) -> ArchiveSummary:
        """Stream the full history into ``writer``.

        The writer is opened here and always closed before returning, also when
        an ArchiveError (or anything else) ends the run early.
        """
        logger.info(f"Archiving history of channel {self._config.channel_id}")
        writer.open()
        try:
            summary = await self._stream(writer)
        finally:
            writer.close()
        logger.info(f"Archive complete: {summary.messages} message(s) in {summary.pages} page(s)")
        return summary

    async def _stream(self, writer: OutputWriter) -> ArchiveSummary:
        cursor: str | None = None
        pages = 0
        messages = 0

        while True:
            page = await self._fetch_page(cursor, pages + 1)
            pages += 1

            for message in page.messages:
                writer.write_element(message)
            writer.flush()
            messages += len(page.messages)

            logger.debug(
                f"Page {pages}: {len(page.messages)} message(s), has_more={page.has_more}"
            )

            if page.is_terminal:
                return ArchiveSummary(pages=pages, messages=messages)
            cursor = page.next_cursor

    async def _fetch_page(self, cursor: str | None, page_number: int) -> Page:
        retrying = build_retrying(
            self._config.retry_ceiling,
            self._config.base_backoff_delay,
            self._config.max_backoff_delay,
            sleep=self._sleep,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    page = await self._fetcher.fetch(cursor)
        except ApiError as ex:
            logger.error(f"Page {page_number}: {ex}")
            raise ArchiveError(str(ex)) from ex
        except TRANSIENT_ERRORS as ex:
            logger.error(f"Page {page_number}: retries exhausted ({ex})")
            raise ArchiveError(
                f"Giving up on page {page_number} after {self._config.retry_ceiling} "
                f"retries: {ex}"
            ) from ex
        return page
