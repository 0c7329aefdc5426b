import logging
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock

from s3_multipart.s3.multipart.finished_piece import FinishedPiece

logger = logging.getLogger(__name__)


class UploadPhase(Enum):
    IDLE = "idle"
    INITIATED = "initiated"
    PARTS_IN_FLIGHT = "parts-in-flight"
    ALL_PARTS_ACKED = "all-parts-acked"
    COMPLETING = "completing"
    COMPLETED = "completed"
    ABORTING = "aborting"
    ABORTED = "aborted"
    FAILED = "failed"


_TRANSITIONS: dict[UploadPhase, set[UploadPhase]] = {
    UploadPhase.IDLE: {UploadPhase.INITIATED, UploadPhase.FAILED},
    UploadPhase.INITIATED: {UploadPhase.PARTS_IN_FLIGHT, UploadPhase.ABORTING},
    UploadPhase.PARTS_IN_FLIGHT: {UploadPhase.ALL_PARTS_ACKED, UploadPhase.ABORTING},
    UploadPhase.ALL_PARTS_ACKED: {UploadPhase.COMPLETING, UploadPhase.ABORTING},
    UploadPhase.COMPLETING: {UploadPhase.COMPLETED, UploadPhase.ABORTING},
    UploadPhase.ABORTING: {UploadPhase.ABORTED, UploadPhase.FAILED},
    UploadPhase.COMPLETED: set(),
    UploadPhase.ABORTED: set(),
    UploadPhase.FAILED: set(),
}


@dataclass
class UploadState:
    total_parts: int
    phase: UploadPhase = UploadPhase.IDLE
    upload_id: str | None = None
    parts: list[FinishedPiece] = field(default_factory=list)
    lock: Lock = field(default_factory=Lock, repr=False)

    def transition(self, phase: UploadPhase) -> None:
        with self.lock:
            allowed = _TRANSITIONS[self.phase]
            if phase not in allowed:
                raise ValueError(
                    f"Invalid upload phase transition {self.phase.value} -> {phase.value}"
                )
            logger.debug(f"Upload {self.upload_id}: {self.phase.value} -> {phase.value}")
            self.phase = phase

    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.phase]

    def add_finished(self, part: FinishedPiece) -> None:
        with self.lock:
            self.parts.append(part)

    def finished_parts(self) -> list[FinishedPiece]:
        with self.lock:
            return list(self.parts)

    def finished(self) -> int:
        with self.lock:
            return len(self.parts)

    def remaining(self) -> int:
        count = self.finished()
        assert (
            count <= self.total_parts
        ), f"Count {count} is greater than total parts {self.total_parts}"
        return self.total_parts - count

    def is_done(self) -> bool:
        return self.remaining() == 0
