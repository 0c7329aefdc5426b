import logging
import os
from pathlib import Path

from s3_multipart.errors import PartitionError
from s3_multipart.types import (
    DEFAULT_PART_SIZE,
    MAX_PART_SIZE,
    MAX_PARTS,
    MIN_PART_SIZE,
    PartInfo,
    Range,
    SizeSuffix,
)

logger = logging.getLogger(__name__)


def _derive_part_count(total_size: int, default_part_size: int) -> int:
    if default_part_size <= 0:
        raise PartitionError(f"Invalid default part size: {default_part_size}")
    part_count = max(1, total_size // default_part_size)
    if part_count > MAX_PARTS:
        raise PartitionError(
            f"Cannot derive valid partition: {SizeSuffix(total_size)} at "
            f"{SizeSuffix(default_part_size)} per part needs {part_count} parts, "
            f"more than the maximum of {MAX_PARTS}"
        )
    return part_count


def partition_size(
    total_size: int,
    part_count: int | None = None,
    default_part_size: int = DEFAULT_PART_SIZE,
) -> list[PartInfo]:
    """Split total_size bytes into part_count contiguous parts.

    The division remainder is folded into the last part. A file smaller than
    the minimum part size may only be sent as a single part.
    """
    if total_size <= 0:
        raise PartitionError(f"Nothing to upload, size is {total_size}")
    if part_count is None:
        part_count = _derive_part_count(total_size, default_part_size)
    if part_count < 1:
        raise PartitionError(f"Part count must be at least 1, got {part_count}")
    if part_count > MAX_PARTS:
        raise PartitionError(
            f"Part count {part_count} exceeds the maximum of {MAX_PARTS}"
        )

    part_size = total_size // part_count
    single_small_part = part_count == 1 and total_size < MIN_PART_SIZE
    if part_size < MIN_PART_SIZE and not single_small_part:
        raise PartitionError(
            f"Part size {SizeSuffix(part_size)} ({total_size} bytes / {part_count} parts) "
            f"is below the minimum of {SizeSuffix(MIN_PART_SIZE)}"
        )
    if part_size > MAX_PART_SIZE:
        raise PartitionError(
            f"Part size {SizeSuffix(part_size)} ({total_size} bytes / {part_count} parts) "
            f"is above the maximum of {SizeSuffix(MAX_PART_SIZE)}"
        )

    remainder = total_size - part_size * part_count
    last_part_size = part_size + remainder
    if last_part_size > MAX_PART_SIZE:
        raise PartitionError(
            f"Last part of {SizeSuffix(last_part_size)} would exceed the maximum of "
            f"{SizeSuffix(MAX_PART_SIZE)} after folding in the {remainder} byte remainder"
        )

    parts: list[PartInfo] = []
    offset = 0
    for part_number in range(1, part_count + 1):
        size = last_part_size if part_number == part_count else part_size
        parts.append(PartInfo(part_number=part_number, range=Range(offset, offset + size)))
        offset += size
    assert offset == total_size, f"Partition covers {offset} of {total_size} bytes"
    logger.debug(
        f"Partitioned {total_size} bytes into {part_count} parts of {part_size} bytes, last part {last_part_size}"
    )
    return parts


def partition_file(
    file_path: Path,
    part_count: int | None = None,
    default_part_size: int = DEFAULT_PART_SIZE,
) -> list[PartInfo]:
    """Partition a file on disk by its size; the file is not read."""
    try:
        total_size = os.path.getsize(file_path)
    except OSError as e:
        raise PartitionError(f"Cannot stat {file_path}: {e}") from e
    return partition_size(
        total_size, part_count=part_count, default_part_size=default_part_size
    )
