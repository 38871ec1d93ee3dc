from __future__ import annotations

import asyncio
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

import httpx

from slack_history_archive.archive_config import ArchiveConfig
from slack_history_archive.history_streamer import ArchiveSummary, HistoryStreamer
from slack_history_archive.output_writer import JsonArrayWriter
from slack_history_archive.page_fetcher import SlackPageFetcher
from slack_history_archive.retry_policy import Sleep


@contextmanager
def open_output(output_path: str | None) -> Iterator[BinaryIO]:
    if not output_path:
        yield sys.stdout.buffer
        return
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        yield f


async def run_archive(
    config: ArchiveConfig,
    sink: BinaryIO,
    *,
    client: httpx.AsyncClient | None = None,
    sleep: Sleep = asyncio.sleep,
) -> ArchiveSummary:
    async with SlackPageFetcher(
        config.credential,
        config.channel_id,
        endpoint=config.endpoint,
        page_limit=config.page_limit,
        timeout=config.timeout,
        client=client,
    ) as fetcher:
        streamer = HistoryStreamer(fetcher, config, sleep=sleep)
        return await streamer.run(JsonArrayWriter(sink))
