from pathlib import Path

from s3_multipart.errors import PartitionError
from s3_multipart.types import PartInfo, Range, SizeSuffix


def read_range(file_path: Path, range: Range) -> bytes:
    """Open the file, seek, read the range, and close immediately."""
    with open(file_path, "rb") as f:
        f.seek(range.start)
        data = f.read(range.length)
    if len(data) != range.length:
        raise PartitionError(
            f"Short read from {file_path}: expected {range.length} bytes at offset "
            f"{range.start}, got {len(data)}, was the file truncated?"
        )
    return data


class FilePart:
    """A part of a file on disk, loaded only when it is about to be sent."""

    def __init__(self, file_path: Path, part: PartInfo) -> None:
        self.file_path = file_path
        self.part = part

    @property
    def part_number(self) -> int:
        return self.part.part_number

    @property
    def size(self) -> int:
        return self.part.size

    def load(self) -> bytes:
        return read_range(self.file_path, self.part.range)

    def __repr__(self):
        return f"FilePart(part_number={self.part_number}, size={SizeSuffix(self.size)}, file={self.file_path})"
