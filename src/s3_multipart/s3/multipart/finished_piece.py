from dataclasses import dataclass

from s3_multipart.errors import InconsistentManifestError


@dataclass
class FinishedPiece:
    part_number: int
    etag: str

    def to_json(self) -> dict:
        # amazon s3 style dict
        return {"PartNumber": self.part_number, "ETag": self.etag}

    def __post_init__(self):
        assert isinstance(self.part_number, int)
        assert isinstance(self.etag, str)


def build_manifest(pieces: list[FinishedPiece], total_parts: int) -> list[dict]:
    """Return the completion manifest sorted by part number.

    Raises InconsistentManifestError unless the part numbers are exactly
    1..total_parts.
    """
    ordered = sorted(pieces, key=lambda p: p.part_number)
    seen: set[int] = set()
    duplicates: list[int] = []
    for p in ordered:
        if p.part_number in seen:
            duplicates.append(p.part_number)
        seen.add(p.part_number)
    if duplicates:
        raise InconsistentManifestError(
            f"Duplicate part numbers in manifest: {duplicates}"
        )
    expected = set(range(1, total_parts + 1))
    missing = sorted(expected - seen)
    unexpected = sorted(seen - expected)
    if missing or unexpected:
        raise InconsistentManifestError(
            f"Manifest does not cover parts 1..{total_parts}: missing {missing}, unexpected {unexpected}"
        )
    for p in ordered:
        if not p.etag:
            raise InconsistentManifestError(f"Part {p.part_number} has no ETag")
    return [p.to_json() for p in ordered]
