from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Page:
    """One batch of messages from the history endpoint, newest first."""

    messages: tuple[Any, ...] = field(default_factory=tuple)
    next_cursor: str | None = None
    has_more: bool = False

    @property
    def is_terminal(self) -> bool:
        return not (self.has_more and self.next_cursor)
