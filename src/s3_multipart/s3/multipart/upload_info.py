from dataclasses import dataclass
from pathlib import Path

from botocore.client import BaseClient

from s3_multipart.types import PartInfo


@dataclass
class UploadInfo:
    s3_client: BaseClient
    bucket_name: str
    object_name: str
    src_file_path: Path
    upload_id: str
    parts: list[PartInfo]
    retries: int
    backoff_base: float
    backoff_max: float

    def total_parts(self) -> int:
        return len(self.parts)
