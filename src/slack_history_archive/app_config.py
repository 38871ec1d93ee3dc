from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from slack_history_archive.archive_config import ArchiveConfig
from slack_history_archive.page_fetcher import CONVERSATION_HISTORY_ENDPOINT, DEFAULT_PAGE_LIMIT


@dataclass
class RuntimeEnv:
    api_token: str
    channel: str


@dataclass
class AppConfig:
    retry_ceiling: int
    base_backoff_seconds: float
    max_backoff_seconds: float
    page_limit: int
    endpoint: str
    timeout_seconds: float
    output_path: str | None
    log_level: str
    log_file: str | None


def load_json_config(path: Path | None = None) -> dict:
    config_path = path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def parse_app_config(config: dict) -> AppConfig:
    return AppConfig(
        retry_ceiling=int(config.get("RetryCeiling", 5)),
        base_backoff_seconds=float(config.get("BaseBackoffSeconds", 1.0)),
        max_backoff_seconds=float(config.get("MaxBackoffSeconds", 60.0)),
        page_limit=int(config.get("PageLimit", DEFAULT_PAGE_LIMIT)),
        endpoint=str(config.get("Endpoint", CONVERSATION_HISTORY_ENDPOINT)),
        timeout_seconds=float(config.get("TimeoutSeconds", 30.0)),
        output_path=str(config.get("OutputPath", "")).strip() or None,
        log_level=config.get("LogLevel", "INFO"),
        log_file=str(config.get("LogFile", "")).strip() or None,
    )


def _first_env(*names: str) -> str:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return ""


def resolve_runtime_env() -> RuntimeEnv:
    # API_TOKEN / CHANNEL are the unprefixed names older deployments used
    return RuntimeEnv(
        api_token=_first_env("SLACK_API_TOKEN", "API_TOKEN"),
        channel=_first_env("SLACK_CHANNEL", "CHANNEL"),
    )


def build_archive_config(app: AppConfig, env: RuntimeEnv) -> ArchiveConfig:
    config = ArchiveConfig(
        credential=env.api_token,
        channel_id=env.channel,
        retry_ceiling=app.retry_ceiling,
        base_backoff_delay=app.base_backoff_seconds,
        max_backoff_delay=app.max_backoff_seconds,
        page_limit=app.page_limit,
        endpoint=app.endpoint,
        timeout=app.timeout_seconds,
    )
    config.validate()
    return config
