"""Attention signal raised when the intake wizard refuses to advance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Protocol

from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttentionSignal:
    """Payload of a blocked advance: what to tell the user and which documents to revisit."""

    title: str
    description: str
    unverified_documents: List[str] = field(default_factory=list)


class AttentionNotifier(Protocol):
    def notify(self, signal: AttentionSignal) -> None: ...


class LoggingAttentionNotifier:
    """Default notifier: records the signal in the application log."""

    def notify(self, signal: AttentionSignal) -> None:
        logger.warning(
            f"Attention: {signal.title}",
            extra={
                "extra_fields": {
                    "description": signal.description,
                    "unverified_documents": signal.unverified_documents,
                }
            },
        )


class RecordingAttentionNotifier:
    """Keeps every signal so that a caller can render and clear them later."""

    def __init__(self):
        self.signals: List[AttentionSignal] = []

    def notify(self, signal: AttentionSignal) -> None:
        self.signals.append(signal)

    def drain(self) -> List[AttentionSignal]:
        signals, self.signals = self.signals, []
        return signals
