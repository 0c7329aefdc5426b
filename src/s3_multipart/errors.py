from botocore.exceptions import (
    ClientError,
    HTTPClientError,
)
from botocore.exceptions import ConnectionError as BotoConnectionError

_TRANSIENT_STATUS_CODES = {408, 429}
_TRANSIENT_ERROR_CODES = {
    "InternalError",
    "RequestTimeout",
    "RequestTimeoutException",
    "ServiceUnavailable",
    "SlowDown",
    "Throttling",
    "ThrottlingException",
}


class S3MultipartError(Exception):
    """Base class for every error raised by s3_multipart."""


class ConfigError(S3MultipartError):
    """Missing or malformed configuration, raised before any network call."""


class PartitionError(S3MultipartError):
    """The file cannot be split into parts the service accepts."""


class TransientIOError(S3MultipartError):
    """A service or network failure that may succeed on retry."""


class PermanentIOError(S3MultipartError):
    """A service failure that will not succeed on retry (4xx, access denied)."""


class UploadDeadlineError(TransientIOError):
    """The overall operation deadline expired."""


class InconsistentManifestError(S3MultipartError):
    """The completed-part manifest has gaps or duplicates."""


class AbortFailedError(S3MultipartError):
    """Aborting the multipart session failed after an earlier failure.

    The session is left open on the service and must be cleaned up by hand
    (or by a bucket lifecycle rule).
    """

    def __init__(self, message: str, upload_id: str, original: Exception) -> None:
        super().__init__(message)
        self.upload_id = upload_id
        self.original = original


def _client_error_is_transient(err: ClientError) -> bool:
    response = err.response or {}
    code = response.get("Error", {}).get("Code", "")
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    if code in _TRANSIENT_ERROR_CODES:
        return True
    if isinstance(status, int):
        return status >= 500 or status in _TRANSIENT_STATUS_CODES
    return False


def classify_error(err: Exception, context: str = "") -> S3MultipartError:
    """Wrap a client library exception as a TransientIOError or PermanentIOError.

    Errors that are already S3MultipartError are returned as is.
    """
    if isinstance(err, S3MultipartError):
        return err
    prefix = f"{context}: " if context else ""
    if isinstance(err, ClientError):
        if _client_error_is_transient(err):
            return TransientIOError(f"{prefix}{err}")
        return PermanentIOError(f"{prefix}{err}")
    if isinstance(err, (BotoConnectionError, HTTPClientError, TimeoutError)):
        return TransientIOError(f"{prefix}{err}")
    return PermanentIOError(f"{prefix}{err}")
