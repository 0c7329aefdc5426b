import re
from dataclasses import dataclass

MIN_PART_SIZE = 5 * 1024 * 1024  # 5MB, except for a sole part
MAX_PART_SIZE = 5 * 1024 * 1024 * 1024  # 5GB
DEFAULT_PART_SIZE = 8 * 1024 * 1024
MAX_PARTS = 10000

_UNITS = ["B", "K", "M", "G", "T", "P"]


def _to_size_suffix(size: int) -> str:
    if size < 0:
        raise ValueError(f"Invalid size: {size}")
    val: float = size
    unit = _UNITS[0]
    for next_unit in _UNITS[1:]:
        if val < 1024:
            break
        val = val / 1024
        unit = next_unit
    # If the float is an integer, drop the decimal, otherwise format with one decimal.
    if float(val).is_integer():
        return f"{int(val)}{unit}"
    return f"{val:.1f}{unit}"


# Allows decimals (e.g., 16.5MB)
_PATTERN_SIZE_SUFFIX = re.compile(r"^(\d+(?:\.\d+)?)([A-Za-z]*)$")


def _from_size_suffix(size: str) -> int:
    match = _PATTERN_SIZE_SUFFIX.match(size.strip())
    if match is None:
        raise ValueError(f"Invalid size suffix: {size}")
    num_str, suffix = match.group(1), match.group(2)
    n = float(num_str)
    if not suffix:
        return int(n)
    # Determine the unit from the first letter (e.g., "M" from "MB")
    unit = suffix[0].upper()
    if unit not in _UNITS:
        raise ValueError(f"Invalid size suffix: {suffix}")
    return int(n * 1024 ** _UNITS.index(unit))


class SizeSuffix:
    def __init__(self, size: "int | str | SizeSuffix"):
        self._size: int
        if isinstance(size, SizeSuffix):
            self._size = size._size
        elif isinstance(size, int):
            self._size = size
        elif isinstance(size, str):
            self._size = _from_size_suffix(size)
        elif isinstance(size, float):
            self._size = int(size)
        else:
            raise ValueError(f"Invalid type for size: {type(size)}")

    def as_int(self) -> int:
        return self._size

    def as_str(self) -> str:
        return _to_size_suffix(self._size)

    def __repr__(self) -> str:
        return self.as_str()

    def __str__(self) -> str:
        return self.as_str()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (SizeSuffix, int)):
            return False
        return self._size == SizeSuffix(other)._size

    def __hash__(self) -> int:
        return hash(self._size)

    def __int__(self) -> int:
        return self._size


class Range:
    def __init__(self, start: int | SizeSuffix, end: int | SizeSuffix):
        self.start: int = int(SizeSuffix(start))  # inclusive
        self.end: int = int(
            SizeSuffix(end)
        )  # exclusive (not like http byte range which is inclusive)

    @property
    def length(self) -> int:
        return self.end - self.start

    def to_header(self) -> dict[str, str]:
        last = self.end - 1
        val = f"bytes={self.start}-{last}"
        return {"Range": val}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return False
        return self.start == other.start and self.end == other.end

    def __repr__(self) -> str:
        return f"Range({self.start}, {self.end})"


@dataclass
class PartInfo:
    part_number: int
    range: Range

    def __post_init__(self):
        assert self.part_number >= 1
        assert self.part_number <= MAX_PARTS
        assert self.range.start >= 0
        assert self.range.end > self.range.start

    @property
    def size(self) -> int:
        return self.range.length

