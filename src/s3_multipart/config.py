import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from s3_multipart.errors import ConfigError
from s3_multipart.s3.create import S3Config
from s3_multipart.s3.types import S3MultiPartUploadConfig
from s3_multipart.types import DEFAULT_PART_SIZE, SizeSuffix

ENV_BUCKET = "AWSBUCKET"
ENV_REGION = "AWSREGION"
ENV_ENDPOINT_URL = "S3_ENDPOINT_URL"
ENV_PART_SIZE = "S3_MULTIPART_PART_SIZE"
ENV_CONCURRENCY = "S3_MULTIPART_CONCURRENCY"
ENV_RETRIES = "S3_MULTIPART_RETRIES"
ENV_TIMEOUT_CONNECT = "S3_MULTIPART_TIMEOUT_CONNECT"
ENV_TIMEOUT_READ = "S3_MULTIPART_TIMEOUT_READ"
ENV_DEADLINE = "S3_MULTIPART_DEADLINE"


def _required(env: dict[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def _optional_int(env: dict[str, str], name: str) -> int | None:
    value = env.get(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _optional_float(env: dict[str, str], name: str) -> float | None:
    value = env.get(name, "").strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def _optional_size(env: dict[str, str], name: str) -> int | None:
    value = env.get(name, "").strip()
    if not value:
        return None
    try:
        return SizeSuffix(value).as_int()
    except ValueError as e:
        raise ConfigError(f"{name} must be a size like 8M, got {value!r}") from e


@dataclass
class UploaderConfig:
    """Everything needed to run an upload, read from the environment."""

    bucket_name: str
    region_name: str
    endpoint_url: str | None = None
    part_size: int = DEFAULT_PART_SIZE
    concurrency: int | None = None
    retries: int | None = None
    timeout_connection: int | None = None
    timeout_read: int | None = None
    deadline: float | None = None

    @staticmethod
    def from_env(
        env: dict[str, str] | None = None, dotenv_path: Path | None = None
    ) -> "UploaderConfig":
        """Build from env (default os.environ after loading .env).

        Raises ConfigError when the bucket or region is missing or a value is malformed.
        """
        if env is None:
            load_dotenv(dotenv_path=dotenv_path)
            env = dict(os.environ)
        concurrency = _optional_int(env, ENV_CONCURRENCY)
        if concurrency is not None and concurrency < 1:
            raise ConfigError(f"{ENV_CONCURRENCY} must be at least 1, got {concurrency}")
        retries = _optional_int(env, ENV_RETRIES)
        if retries is not None and retries < 0:
            raise ConfigError(f"{ENV_RETRIES} must not be negative, got {retries}")
        return UploaderConfig(
            bucket_name=_required(env, ENV_BUCKET),
            region_name=_required(env, ENV_REGION),
            endpoint_url=env.get(ENV_ENDPOINT_URL) or None,
            part_size=_optional_size(env, ENV_PART_SIZE) or DEFAULT_PART_SIZE,
            concurrency=concurrency,
            retries=retries,
            timeout_connection=_optional_int(env, ENV_TIMEOUT_CONNECT),
            timeout_read=_optional_int(env, ENV_TIMEOUT_READ),
            deadline=_optional_float(env, ENV_DEADLINE),
        )

    def s3_config(self, verbose: bool = False, concurrency: int | None = None) -> S3Config:
        """Client settings; the connection pool holds at least one connection per upload worker."""
        return S3Config(
            region_name=self.region_name,
            endpoint_url=self.endpoint_url,
            max_pool_connections=concurrency or self.concurrency,
            timeout_connection=self.timeout_connection,
            timeout_read=self.timeout_read,
            verbose=verbose,
        )

    def upload_config(self, part_count: int | None = None) -> S3MultiPartUploadConfig:
        return S3MultiPartUploadConfig(
            part_count=part_count,
            part_size=self.part_size,
            concurrency=self.concurrency,
            retries=self.retries,
            deadline=self.deadline,
        )
