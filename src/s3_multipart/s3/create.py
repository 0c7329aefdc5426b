import logging
import warnings
from dataclasses import dataclass

import boto3
from botocore.client import BaseClient
from botocore.config import Config

logger = logging.getLogger(__name__)

_MAX_CONNECTIONS = 10
_TIMEOUT_READ = 120
_TIMEOUT_CONNECT = 60


@dataclass
class S3Config:
    region_name: str | None = None
    endpoint_url: str | None = None
    max_pool_connections: int | None = None
    timeout_connection: int | None = None
    timeout_read: int | None = None
    verbose: bool | None = None

    def resolve_defaults(self) -> None:
        self.max_pool_connections = max(self.max_pool_connections or 0, _MAX_CONNECTIONS)
        self.timeout_connection = self.timeout_connection or _TIMEOUT_CONNECT
        self.timeout_read = self.timeout_read or _TIMEOUT_READ
        self.verbose = self.verbose or False


def create_s3_client(s3_config: S3Config | None = None) -> BaseClient:
    """Create and return an S3 client.

    Credentials are resolved by boto3 (environment, shared config, instance role).
    """
    s3_config = s3_config or S3Config()
    s3_config.resolve_defaults()
    endpoint_url = s3_config.endpoint_url
    if (endpoint_url is not None) and not (endpoint_url.startswith("http")):
        if s3_config.verbose:
            warnings.warn(
                f"Endpoint URL is schema naive: {endpoint_url}, assuming HTTPS"
            )
        endpoint_url = f"https://{endpoint_url}"
    logger.debug(
        f"Creating S3 client for region {s3_config.region_name}, endpoint {endpoint_url or 'default'}"
    )
    session = boto3.session.Session()  # type: ignore
    return session.client(
        service_name="s3",
        endpoint_url=endpoint_url,
        config=Config(
            signature_version="s3v4",
            region_name=s3_config.region_name,
            max_pool_connections=s3_config.max_pool_connections,
            read_timeout=s3_config.timeout_read,
            connect_timeout=s3_config.timeout_connection,
        ),
    )
