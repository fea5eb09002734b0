from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List

from .colors import WHITE, Color, as_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """One player-facing log line; color doubles as its severity."""

    text: str
    color: Color = WHITE


class MessageLog:
    """Ordered, in-memory game message log.

    Keeps a finite history (capacity) to avoid unbounded growth over a long
    run; the oldest lines are dropped first.
    """

    def __init__(self, capacity: int = 500) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._messages: List[Message] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, text: str, color: Color = WHITE) -> Message:
        msg = Message(str(text), color)
        self._messages.append(msg)
        if len(self._messages) > self._capacity:
            del self._messages[0 : len(self._messages) - self._capacity]
        logger.debug("message: %s", msg.text)
        return msg

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageLog):
            return NotImplemented
        return self._messages == other._messages

    def texts(self) -> List[str]:
        return [m.text for m in self._messages]

    def get_recent(self, n: int) -> List[Message]:
        if n <= 0:
            return []
        return self._messages[-n:]

    def last(self) -> str:
        return self._messages[-1].text if self._messages else ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity": self._capacity,
            "messages": [[m.text, list(m.color)] for m in self._messages],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MessageLog":
        log = cls(capacity=int(data.get("capacity", 500)))
        for text, color in data.get("messages", []):
            log._messages.append(Message(str(text), as_color(color)))
        return log
