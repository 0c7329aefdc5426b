from dataclasses import dataclass, field
from pathlib import Path

from s3_multipart.errors import ConfigError
from s3_multipart.s3.multipart.finished_piece import FinishedPiece
from s3_multipart.types import DEFAULT_PART_SIZE

_DEFAULT_CONCURRENCY = 8
_DEFAULT_RETRIES = 3
_DEFAULT_BACKOFF_BASE = 0.5
_DEFAULT_BACKOFF_MAX = 20.0


@dataclass
class S3UploadTarget:
    """Target information for S3 upload."""

    src_file: Path
    bucket_name: str
    s3_key: str


@dataclass
class S3MultiPartUploadConfig:
    """Input for multi-part upload."""

    part_count: int | None = None  # derived from part_size when unset
    part_size: int = DEFAULT_PART_SIZE
    concurrency: int | None = None
    retries: int | None = None
    backoff_base: float | None = None  # seconds, doubled on every retry
    backoff_max: float | None = None
    deadline: float | None = None  # seconds for the whole operation, None for no limit

    def resolve_defaults(self) -> None:
        self.concurrency = (
            self.concurrency if self.concurrency is not None else _DEFAULT_CONCURRENCY
        )
        self.retries = self.retries if self.retries is not None else _DEFAULT_RETRIES
        self.backoff_base = (
            self.backoff_base
            if self.backoff_base is not None
            else _DEFAULT_BACKOFF_BASE
        )
        self.backoff_max = (
            self.backoff_max if self.backoff_max is not None else _DEFAULT_BACKOFF_MAX
        )
        if self.concurrency < 1:
            raise ConfigError(f"Concurrency must be at least 1, got {self.concurrency}")
        if self.retries < 0:
            raise ConfigError(f"Retries must not be negative, got {self.retries}")


@dataclass
class MultiUploadResult:
    bucket_name: str
    object_name: str
    upload_id: str
    etag: str | None
    parts: list[FinishedPiece] = field(default_factory=list)
    elapsed: float = 0.0
