"""
Unit test file.
"""

import unittest

from botocore.exceptions import EndpointConnectionError, ReadTimeoutError
from fake_s3 import client_error

from s3_multipart import (
    PartitionError,
    PermanentIOError,
    TransientIOError,
    UploadDeadlineError,
)
from s3_multipart.errors import classify_error


class ClassifyErrorTester(unittest.TestCase):
    """Mapping client library errors to transient or permanent."""

    def test_server_errors_are_transient(self) -> None:
        for code, status in [
            ("InternalError", 500),
            ("ServiceUnavailable", 503),
            ("RequestTimeout", 400),
            ("TooManyRequests", 429),
        ]:
            err = classify_error(client_error(code, status), "upload_part 1")
            self.assertIsInstance(err, TransientIOError, code)
            self.assertIn("upload_part 1", str(err))

    def test_client_errors_are_permanent(self) -> None:
        for code, status in [
            ("AccessDenied", 403),
            ("NoSuchBucket", 404),
            ("NoSuchUpload", 404),
            ("EntityTooSmall", 400),
        ]:
            err = classify_error(client_error(code, status))
            self.assertIsInstance(err, PermanentIOError, code)

    def test_connection_errors_are_transient(self) -> None:
        err = classify_error(EndpointConnectionError(endpoint_url="https://s3.example"))
        self.assertIsInstance(err, TransientIOError)
        err = classify_error(ReadTimeoutError(endpoint_url="https://s3.example"))
        self.assertIsInstance(err, TransientIOError)

    def test_unknown_errors_are_permanent(self) -> None:
        self.assertIsInstance(classify_error(KeyError("UploadId")), PermanentIOError)

    def test_own_errors_pass_through(self) -> None:
        original = PartitionError("short read")
        self.assertIs(classify_error(original), original)
        deadline = UploadDeadlineError("late")
        self.assertIs(classify_error(deadline), deadline)
        self.assertIsInstance(deadline, TransientIOError)


if __name__ == "__main__":
    unittest.main()
