import logging
import time
import warnings
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from pathlib import Path
from threading import Event
from typing import Any, Callable

from botocore.client import BaseClient

from s3_multipart.errors import (
    AbortFailedError,
    PermanentIOError,
    S3MultipartError,
    TransientIOError,
    UploadDeadlineError,
    classify_error,
)
from s3_multipart.file_part import FilePart
from s3_multipart.s3.multipart.finished_piece import FinishedPiece, build_manifest
from s3_multipart.s3.multipart.upload_info import UploadInfo
from s3_multipart.s3.multipart.upload_state import UploadPhase, UploadState
from s3_multipart.s3.types import MultiUploadResult
from s3_multipart.types import PartInfo, SizeSuffix

logger = logging.getLogger(__name__)


class _UploadCancelled(Exception):
    """Raised inside a worker once another part has failed."""


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def backoff_delay(attempt: int, base: float, cap: float) -> float:
    """Exponential backoff: base, 2*base, 4*base ... capped at cap."""
    return min(cap, base * (2**attempt))


def call_with_retries(
    fn: Callable[[], Any],
    what: str,
    retries: int,
    backoff_base: float,
    backoff_max: float,
    cancel_signal: Event,
    deadline: float | None = None,
) -> Any:
    """Call fn, retrying transient failures up to retries times.

    Anything that is not a TransientIOError after classification fails at once.
    """
    attempts = retries + 1  # Add one for the initial attempt
    for attempt in range(attempts):
        if cancel_signal.is_set():
            raise _UploadCancelled(what)
        try:
            return fn()
        except Exception as e:
            err = classify_error(e, what)
            if not isinstance(err, TransientIOError) or attempt == attempts - 1:
                logger.error(f"{what} failed after {attempt + 1} attempt(s): {err}")
                if err is e:
                    raise
                raise err from e
            delay = backoff_delay(attempt, backoff_base, backoff_max)
            remaining = _remaining(deadline)
            if remaining is not None and delay >= remaining:
                raise UploadDeadlineError(
                    f"{what}: deadline expires before next retry, last error: {err}"
                ) from e
            logger.warning(
                f"{what} failed: {err}, retrying in {delay:.2f}s ({attempt + 1}/{retries})"
            )
            if cancel_signal.wait(delay):
                raise _UploadCancelled(what)
    raise Exception("Should not reach here")


def upload_task(
    info: UploadInfo,
    chunk: FilePart,
    cancel_signal: Event,
    deadline: float | None,
) -> FinishedPiece:
    part_number = chunk.part_number
    if cancel_signal.is_set():
        raise _UploadCancelled(f"part {part_number}")
    try:
        data = chunk.load()
    except OSError as e:
        cancel_signal.set()
        raise PermanentIOError(f"Cannot read part {part_number} of {chunk.file_path}: {e}") from e
    except S3MultipartError:
        cancel_signal.set()
        raise

    def send() -> str:
        logger.info(
            f"Uploading part {part_number}/{info.total_parts()} of {info.src_file_path}, size {SizeSuffix(len(data))}"
        )
        response = info.s3_client.upload_part(
            Bucket=info.bucket_name,
            Key=info.object_name,
            PartNumber=part_number,
            UploadId=info.upload_id,
            Body=data,
        )
        etag = response.get("ETag")
        if not etag:
            raise PermanentIOError(f"upload_part returned no ETag for part {part_number}")
        return etag

    try:
        etag = call_with_retries(
            send,
            what=f"upload_part {part_number}",
            retries=info.retries,
            backoff_base=info.backoff_base,
            backoff_max=info.backoff_max,
            cancel_signal=cancel_signal,
            deadline=deadline,
        )
    except _UploadCancelled:
        raise
    except BaseException:
        # Stop queued parts from starting before the runner sees this failure.
        cancel_signal.set()
        raise
    return FinishedPiece(part_number=part_number, etag=etag)


def _cancel_all(futures: dict[Future, FilePart], cancel_signal: Event) -> None:
    cancel_signal.set()
    for fut in futures:
        fut.cancel()


def upload_runner(
    upload_state: UploadState,
    upload_info: UploadInfo,
    upload_threads: int,
    cancel_signal: Event,
    deadline: float | None,
) -> None:
    """Upload every part on a bounded pool; the first terminal failure cancels the rest."""
    chunks = [FilePart(upload_info.src_file_path, p) for p in upload_info.parts]
    with ThreadPoolExecutor(max_workers=upload_threads) as executor:
        futures: dict[Future, FilePart] = {
            executor.submit(upload_task, upload_info, chunk, cancel_signal, deadline): chunk
            for chunk in chunks
        }
        try:
            for fut in as_completed(futures, timeout=_remaining(deadline)):
                try:
                    piece: FinishedPiece = fut.result()
                except _UploadCancelled:
                    continue
                upload_state.add_finished(piece)
                logger.debug(
                    f"Part {piece.part_number} done, {upload_state.remaining()} remaining"
                )
        except FuturesTimeoutError as e:
            _cancel_all(futures, cancel_signal)
            raise UploadDeadlineError(
                f"Deadline expired with {upload_state.remaining()} of {upload_info.total_parts()} parts outstanding"
            ) from e
        except BaseException as e:
            logger.error(f"Part upload failed, cancelling outstanding parts: {e}")
            _cancel_all(futures, cancel_signal)
            raise


def _abort_upload(
    s3_client: BaseClient,
    upload_state: UploadState,
    bucket_name: str,
    object_name: str,
    original: BaseException,
) -> None:
    upload_id = upload_state.upload_id
    assert upload_id is not None
    upload_state.transition(UploadPhase.ABORTING)
    logger.warning(
        f"Aborting multipart upload {upload_id} for {bucket_name}/{object_name}: {original}"
    )
    try:
        s3_client.abort_multipart_upload(
            Bucket=bucket_name, Key=object_name, UploadId=upload_id
        )
    except Exception as e:
        upload_state.transition(UploadPhase.FAILED)
        warnings.warn(f"Error aborting upload {upload_id}: {e}")
        raise AbortFailedError(
            f"Upload of {bucket_name}/{object_name} failed ({original}) and abort of session {upload_id} also failed: {e}",
            upload_id=upload_id,
            original=original if isinstance(original, Exception) else Exception(str(original)),
        ) from e
    upload_state.transition(UploadPhase.ABORTED)
    logger.info(f"Aborted multipart upload {upload_id}")


def upload_file_multipart(
    s3_client: BaseClient,
    bucket_name: str,
    file_path: Path,
    object_name: str,
    parts: list[PartInfo],
    upload_threads: int = 8,
    retries: int = 3,
    backoff_base: float = 0.5,
    backoff_max: float = 20.0,
    deadline: float | None = None,
    upload_state: UploadState | None = None,
) -> MultiUploadResult:
    """Upload a file to the bucket using multipart upload over the given parts.

    Drives create -> upload parts -> complete. Any unrecoverable failure after
    the session is created aborts the session before the error propagates.
    """
    if not parts:
        raise ValueError("No parts to upload")
    start_time = time.monotonic()
    deadline_at = start_time + deadline if deadline is not None else None
    upload_state = upload_state or UploadState(total_parts=len(parts))
    cancel_signal = Event()

    # Initiate multipart upload
    logger.info(f"Creating multipart upload for {file_path} to {bucket_name}/{object_name}")
    try:
        mpu = s3_client.create_multipart_upload(Bucket=bucket_name, Key=object_name)
        upload_id = mpu["UploadId"]
    except Exception as e:
        upload_state.transition(UploadPhase.FAILED)
        raise classify_error(e, "create_multipart_upload") from e
    upload_state.upload_id = upload_id
    upload_state.transition(UploadPhase.INITIATED)

    upload_info = UploadInfo(
        s3_client=s3_client,
        bucket_name=bucket_name,
        object_name=object_name,
        src_file_path=file_path,
        upload_id=upload_id,
        parts=parts,
        retries=retries,
        backoff_base=backoff_base,
        backoff_max=backoff_max,
    )

    try:
        upload_state.transition(UploadPhase.PARTS_IN_FLIGHT)
        upload_runner(
            upload_state=upload_state,
            upload_info=upload_info,
            upload_threads=upload_threads,
            cancel_signal=cancel_signal,
            deadline=deadline_at,
        )
        upload_state.transition(UploadPhase.ALL_PARTS_ACKED)

        ######################## COMPLETE UPLOAD #######################
        manifest = build_manifest(upload_state.finished_parts(), len(parts))
        logger.info(f"Sending multi part completion message for {file_path}, {len(manifest)} parts")
        upload_state.transition(UploadPhase.COMPLETING)
        response = call_with_retries(
            lambda: s3_client.complete_multipart_upload(
                Bucket=bucket_name,
                Key=object_name,
                UploadId=upload_id,
                MultipartUpload={"Parts": manifest},
            ),
            what="complete_multipart_upload",
            retries=retries,
            backoff_base=backoff_base,
            backoff_max=backoff_max,
            cancel_signal=cancel_signal,
            deadline=deadline_at,
        )
        upload_state.transition(UploadPhase.COMPLETED)
    except (Exception, KeyboardInterrupt) as e:
        _abort_upload(s3_client, upload_state, bucket_name, object_name, e)
        if isinstance(e, S3MultipartError) or not isinstance(e, Exception):
            raise
        raise classify_error(e, "multipart upload") from e

    elapsed = time.monotonic() - start_time
    logger.info(
        f"Multipart upload completed: {file_path} to {bucket_name}/{object_name} in {elapsed:.2f}s"
    )
    return MultiUploadResult(
        bucket_name=bucket_name,
        object_name=object_name,
        upload_id=upload_id,
        etag=(response or {}).get("ETag"),
        parts=sorted(upload_state.finished_parts(), key=lambda p: p.part_number),
        elapsed=elapsed,
    )
