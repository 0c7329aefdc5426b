import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from s3_multipart.config import UploaderConfig
from s3_multipart.errors import AbortFailedError, ConfigError, S3MultipartError
from s3_multipart.log import configure_logging, setup_default_logging
from s3_multipart.s3.api import S3Client
from s3_multipart.s3.types import S3UploadTarget
from s3_multipart.types import SizeSuffix
from s3_multipart.util import locked_print


@dataclass
class Args:
    src: Path
    key: str
    parts: int | None
    part_size: str | None
    concurrency: int | None
    retries: int | None
    deadline: float | None
    env_file: Path | None
    log_file: Path | None
    verbose: bool


def _parse_args(argv: list[str] | None = None) -> Args:
    parser = argparse.ArgumentParser(
        description="Upload a file to an S3 bucket with a multipart upload. "
        "The bucket and region come from AWSBUCKET and AWSREGION."
    )
    parser.add_argument("src", help="File to upload", type=Path)
    parser.add_argument(
        "--key", help="Destination object key, defaults to the file name", type=str
    )
    parser.add_argument(
        "--parts",
        help="Number of parts, derived from --part-size when omitted",
        type=int,
        default=None,
    )
    parser.add_argument(
        "--part-size",
        help="Part size used to derive the part count, in SizeSuffix form (e.g. 8M)",
        type=str,
        default=None,
    )
    parser.add_argument(
        "--concurrency",
        help="Max number of parts to upload in parallel",
        type=int,
        default=None,
    )
    parser.add_argument("--retries", help="Retries per part", type=int, default=None)
    parser.add_argument(
        "--deadline",
        help="Seconds before the whole upload is abandoned",
        type=float,
        default=None,
    )
    parser.add_argument("--env-file", help="Path to a .env file", type=Path)
    parser.add_argument("--log-file", help="Also log to this file", type=Path)
    parser.add_argument("-v", "--verbose", help="Verbose output", action="store_true")

    args = parser.parse_args(argv)
    src: Path = args.src
    out = Args(
        src=src,
        key=args.key or src.name,
        parts=args.parts,
        part_size=args.part_size,
        concurrency=args.concurrency,
        retries=args.retries,
        deadline=args.deadline,
        env_file=args.env_file,
        log_file=args.log_file,
        verbose=args.verbose,
    )
    return out


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = _parse_args(argv)
    if args.verbose or args.log_file:
        configure_logging(
            level=logging.DEBUG if args.verbose else logging.INFO,
            log_file=args.log_file,
        )
    else:
        setup_default_logging()
    try:
        config = UploaderConfig.from_env(dotenv_path=args.env_file)
        upload_config = config.upload_config(part_count=args.parts)
        if args.part_size is not None:
            try:
                upload_config.part_size = SizeSuffix(args.part_size).as_int()
            except ValueError as e:
                raise ConfigError(
                    f"--part-size must be a size like 8M, got {args.part_size!r}"
                ) from e
        if args.concurrency is not None:
            upload_config.concurrency = args.concurrency
        if args.retries is not None:
            upload_config.retries = args.retries
        if args.deadline is not None:
            upload_config.deadline = args.deadline
        client = S3Client(
            config.s3_config(
                verbose=args.verbose, concurrency=upload_config.concurrency
            )
        )
        target = S3UploadTarget(
            src_file=args.src, bucket_name=config.bucket_name, s3_key=args.key
        )
        result = client.upload_file_multipart(target, upload_config)
    except AbortFailedError as e:
        locked_print(f"Error: {e}", file=sys.stderr)
        locked_print(
            f"Multipart session {e.upload_id} is still open and must be aborted manually",
            file=sys.stderr,
        )
        return 1
    except S3MultipartError as e:
        locked_print(f"Error: {e}", file=sys.stderr)
        return 1
    locked_print(
        f"success: {args.src} -> {result.bucket_name}/{result.object_name} "
        f"| {len(result.parts)} parts | time elapsed: {result.elapsed:.2f}s"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
