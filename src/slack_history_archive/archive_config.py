from dataclasses import dataclass

from slack_history_archive.page_fetcher import CONVERSATION_HISTORY_ENDPOINT, DEFAULT_PAGE_LIMIT


@dataclass
class ArchiveConfig:
    credential: str = ""
    channel_id: str = ""
    retry_ceiling: int = 5
    base_backoff_delay: float = 1.0
    max_backoff_delay: float = 60.0
    page_limit: int = DEFAULT_PAGE_LIMIT
    endpoint: str = CONVERSATION_HISTORY_ENDPOINT
    timeout: float = 30.0

    def validate(self) -> None:
        if not self.credential:
            raise ValueError("An API credential is required (SLACK_API_TOKEN).")
        if not self.channel_id:
            raise ValueError("A channel identifier is required (SLACK_CHANNEL).")
        if self.retry_ceiling < 0:
            raise ValueError(f"RetryCeiling must be >= 0, got {self.retry_ceiling}")
        if self.base_backoff_delay <= 0:
            raise ValueError(f"BaseBackoffSeconds must be > 0, got {self.base_backoff_delay}")
        if self.max_backoff_delay < self.base_backoff_delay:
            raise ValueError(
                f"MaxBackoffSeconds ({self.max_backoff_delay}) must be >= "
                f"BaseBackoffSeconds ({self.base_backoff_delay})"
            )
        if self.page_limit <= 0:
            raise ValueError(f"PageLimit must be > 0, got {self.page_limit}")
        if self.timeout <= 0:
            raise ValueError(f"TimeoutSeconds must be > 0, got {self.timeout}")
