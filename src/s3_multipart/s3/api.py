import json
import logging
import warnings
from dataclasses import replace

from botocore.client import BaseClient

from s3_multipart.partition import partition_file
from s3_multipart.s3.create import S3Config, create_s3_client
from s3_multipart.s3.multipart.upload_state import UploadState
from s3_multipart.s3.types import (
    MultiUploadResult,
    S3MultiPartUploadConfig,
    S3UploadTarget,
)
from s3_multipart.s3.upload_file_multipart import upload_file_multipart

logger = logging.getLogger(__name__)


class S3Client:
    def __init__(
        self,
        s3_config: S3Config | None = None,
        client: BaseClient | None = None,
    ) -> None:
        self.s3_config: S3Config = s3_config or S3Config()
        self.client: BaseClient = client or create_s3_client(self.s3_config)

    def upload_file_multipart(
        self,
        upload_target: S3UploadTarget,
        upload_config: S3MultiPartUploadConfig | None = None,
        upload_state: UploadState | None = None,
    ) -> MultiUploadResult:
        # Resolve on a copy, the caller keeps its config as given.
        upload_config = replace(upload_config) if upload_config else S3MultiPartUploadConfig()
        upload_config.resolve_defaults()
        assert upload_config.concurrency is not None
        assert upload_config.retries is not None
        assert upload_config.backoff_base is not None
        assert upload_config.backoff_max is not None
        pool_size = self.s3_config.max_pool_connections
        if pool_size is not None and pool_size < upload_config.concurrency:
            logger.warning(
                f"Connection pool of {pool_size} is smaller than upload concurrency {upload_config.concurrency}"
            )

        # Partition errors surface here, before any network call.
        parts = partition_file(
            upload_target.src_file,
            part_count=upload_config.part_count,
            default_part_size=upload_config.part_size,
        )
        logger.info(
            f"Uploading {upload_target.src_file} as {len(parts)} part(s) to {upload_target.bucket_name}/{upload_target.s3_key}"
        )
        try:
            return upload_file_multipart(
                s3_client=self.client,
                bucket_name=upload_target.bucket_name,
                file_path=upload_target.src_file,
                object_name=upload_target.s3_key,
                parts=parts,
                upload_threads=upload_config.concurrency,
                retries=upload_config.retries,
                backoff_base=upload_config.backoff_base,
                backoff_max=upload_config.backoff_max,
                deadline=upload_config.deadline,
                upload_state=upload_state,
            )
        except Exception as e:
            info_json = {
                "bucket": upload_target.bucket_name,
                "key": upload_target.s3_key,
                "endpoint_url": self.s3_config.endpoint_url,
                "region": self.s3_config.region_name,
                "parts": len(parts),
            }
            info_json_str = json.dumps(info_json, indent=2)
            warnings.warn(f"Error uploading file: {e}\nInfo:\n\n{info_json_str}")
            raise
