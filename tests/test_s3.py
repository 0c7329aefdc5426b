import os
import tempfile
import unittest
from pathlib import Path

from dotenv import load_dotenv

from s3_multipart import (
    S3Client,
    S3MultiPartUploadConfig,
    S3UploadTarget,
    UploaderConfig,
)

load_dotenv()


class S3MultipartLiveTester(unittest.TestCase):
    """Upload against a real bucket, configured through .env."""

    def setUp(self) -> None:
        """Check if all required environment variables are set before running tests."""
        required_vars = [
            "AWSBUCKET",
            "AWSREGION",
            "AWS_ACCESS_KEY_ID",
            "AWS_SECRET_ACCESS_KEY",
        ]
        missing = [var for var in required_vars if not os.getenv(var)]
        if missing:
            self.skipTest(
                f"Missing required environment variables: {', '.join(missing)}"
            )

    def test_upload_chunks(self) -> None:
        config = UploaderConfig.from_env()
        s3_client = S3Client(config.s3_config())
        dst_path = "test_data/s3_multipart_testfile"

        pattern = bytes(range(256))
        _bytes = pattern * (11 * 1024 * 1024 // len(pattern))
        with tempfile.TemporaryDirectory() as tempdir:
            tmpfile = Path(tempdir) / "testfile"
            tmpfile.write_bytes(_bytes)
            upload_target = S3UploadTarget(
                src_file=tmpfile,
                bucket_name=config.bucket_name,
                s3_key=dst_path,
            )
            result = s3_client.upload_file_multipart(
                upload_target, S3MultiPartUploadConfig(part_count=2, concurrency=2)
            )
        self.assertEqual(len(result.parts), 2)
        try:
            head = s3_client.client.head_object(Bucket=config.bucket_name, Key=dst_path)
            self.assertEqual(head["ContentLength"], len(_bytes))
        finally:
            s3_client.client.delete_object(Bucket=config.bucket_name, Key=dst_path)


if __name__ == "__main__":
    unittest.main()
