"""Question domain entity."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

from core.clock import now_ms


@dataclass
class Question:
    """Anonymous question waiting in a receiver's inbox.

    ``sender_id`` exists for shape compatibility only and is never populated:
    senders are anonymous by construction.
    """

    receiver_id: str
    text: str
    id: UUID = field(default_factory=uuid4)
    theme: str = "default"
    is_answered: bool = False
    timestamp: int = field(default_factory=now_ms)
    sender_id: None = None

    def mark_answered(self) -> None:
        """Pending -> Answered. Never reverses."""
        self.is_answered = True
