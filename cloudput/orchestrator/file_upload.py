"""Single file upload handler."""
import logging
import os
import stat
from typing import Callable, Optional, Tuple

from ..errors import (
    SingleShotUploadError,
    SourceOpenError,
    SourceStatError,
    describe_exception,
)
from ..models import CHUNK_SIZE, CommitInfo, UploadResult, UploadTarget, WriteMode, utc_now_seconds
from ..protocols import IStorageClient, ProgressCallback
from ..services.reader import ProgressReader
from ..services.session import ChunkedSessionDriver
from ..utils.paths import resolve_destination

logger = logging.getLogger(__name__)

ProgressFactory = Callable[[UploadTarget], Optional[ProgressCallback]]


class FileUploadHandler:
    """Uploads one local file, picking single-shot or session upload by size."""

    def __init__(
        self,
        client: IStorageClient,
        chunk_size: int = CHUNK_SIZE,
        progress_factory: Optional[ProgressFactory] = None,
    ):
        """
        Initialize file upload handler.

        Args:
            client: Storage client shared by all uploads
            chunk_size: Session chunk size and single-shot threshold
            progress_factory: Builds a progress callback per target
        """
        self._client = client
        self._chunk_size = chunk_size
        self._session = ChunkedSessionDriver(client, chunk_size)
        self._progress_factory = progress_factory

    async def upload(self, source: str, destination: Optional[str] = None) -> UploadResult:
        """
        Upload source to its remote path.

        Raises the typed cloudput error of the step that failed.
        """
        dst = resolve_destination(source, destination)

        try:
            contents = open(source, "rb")
        except OSError as exc:
            raise SourceOpenError(source, f"cannot open {source}: {exc.strerror or exc}") from exc

        with contents:
            target, commit = self._resolve(contents, source, dst)
            callback = self._progress_factory(target) if self._progress_factory else None
            reader = ProgressReader(contents, target.size_bytes, callback)

            chunked = target.size_bytes > self._chunk_size
            logger.debug(
                "Uploading %s -> %s (%d bytes, %s)",
                source,
                dst,
                target.size_bytes,
                "session" if chunked else "single-shot",
            )
            if chunked:
                metadata = await self._session.upload(reader, commit, target.size_bytes)
            else:
                metadata = await self._upload_single(reader, commit)

        logger.info("Uploaded %s -> %s", source, dst)
        return UploadResult.ok(target, chunked=chunked, metadata=metadata)

    def _resolve(self, contents, source: str, dst: str) -> Tuple[UploadTarget, CommitInfo]:
        try:
            info = os.fstat(contents.fileno())
        except OSError as exc:
            raise SourceStatError(source, f"cannot stat {source}: {exc.strerror or exc}") from exc
        if not stat.S_ISREG(info.st_mode):
            raise SourceStatError(source, f"{source} is not a regular file")

        # The service only accepts UTC timestamps with second precision.
        modified = utc_now_seconds()
        target = UploadTarget(
            source_path=source,
            destination_path=dst,
            size_bytes=info.st_size,
            last_modified=modified,
        )
        commit = CommitInfo(path=dst, client_modified=modified, mode=WriteMode.OVERWRITE)
        return target, commit

    async def _upload_single(self, reader: ProgressReader, commit: CommitInfo):
        data = await reader.read_async()
        try:
            metadata = await self._client.upload(commit, data)
        except Exception as exc:
            raise SingleShotUploadError(
                f"did not upload {commit.path}: {describe_exception(exc)}"
            ) from exc
        return metadata or {}
