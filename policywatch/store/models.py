"""Dataclass models for observed page records.

These are plain Python objects kept in memory by
:class:`~policywatch.store.records.RecordStore`.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence, Tuple


class ProcessingState(str, Enum):
    RECEIVED = "received"
    QUEUED = "queued"
    PROCESSED = "processed"


class AdmissionResult(str, Enum):
    ACCEPTED = "accepted"
    DUPLICATE_REJECTED = "duplicate_rejected"


@dataclass
class Record:
    source_url: str
    login_detected: bool
    policy_links: Tuple[str, ...] = ()
    state: ProcessingState = ProcessingState.RECEIVED
    extracted_text: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    received_at: int = field(default_factory=lambda: int(time.time()))

    def __post_init__(self) -> None:
        # Freeze the link list so it cannot change after admission.
        self.policy_links = tuple(self.policy_links)

    @classmethod
    def from_observation(
        cls, url: str, login_detected: bool, policy_links: Sequence[str]
    ) -> "Record":
        return cls(source_url=url, login_detected=login_detected, policy_links=tuple(policy_links))

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    @property
    def is_processed(self) -> bool:
        return self.state is ProcessingState.PROCESSED

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the camelCase shape used on the wire."""
        return {
            "id": self.id,
            "url": self.source_url,
            "loginDetected": self.login_detected,
            "policyLinks": list(self.policy_links),
            "state": self.state.value,
            "extractedText": self.extracted_text,
            "receivedAt": self.received_at,
        }
