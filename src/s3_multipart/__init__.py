from .config import UploaderConfig
from .errors import (
    AbortFailedError,
    ConfigError,
    InconsistentManifestError,
    PartitionError,
    PermanentIOError,
    S3MultipartError,
    TransientIOError,
    UploadDeadlineError,
)
from .partition import partition_file, partition_size
from .s3.api import S3Client
from .s3.create import S3Config
from .s3.multipart.finished_piece import FinishedPiece, build_manifest
from .s3.multipart.upload_state import UploadPhase, UploadState
from .s3.types import MultiUploadResult, S3MultiPartUploadConfig, S3UploadTarget
from .types import (
    DEFAULT_PART_SIZE,
    MAX_PART_SIZE,
    MAX_PARTS,
    MIN_PART_SIZE,
    PartInfo,
    Range,
    SizeSuffix,
)

__all__ = [
    "S3Client",
    "S3Config",
    "S3UploadTarget",
    "S3MultiPartUploadConfig",
    "MultiUploadResult",
    "UploaderConfig",
    "UploadPhase",
    "UploadState",
    "FinishedPiece",
    "build_manifest",
    "partition_file",
    "partition_size",
    "PartInfo",
    "Range",
    "SizeSuffix",
    "DEFAULT_PART_SIZE",
    "MAX_PART_SIZE",
    "MAX_PARTS",
    "MIN_PART_SIZE",
    "S3MultipartError",
    "ConfigError",
    "PartitionError",
    "TransientIOError",
    "PermanentIOError",
    "UploadDeadlineError",
    "InconsistentManifestError",
    "AbortFailedError",
]
