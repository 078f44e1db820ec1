"""Core orchestrator - fans out one upload task per file and joins them."""
import asyncio
import logging
from typing import Optional, Sequence

from ..errors import NoOperandsError
from ..models import CHUNK_SIZE, UploadResult
from ..protocols import IStorageClient
from .file_upload import FileUploadHandler, ProgressFactory
from .models import PutResult

logger = logging.getLogger(__name__)


class PutOrchestrator:
    """
    Uploads many files concurrently using an injected storage client.

    Every source gets its own task; all tasks run to completion and their
    outcomes are folded into one PutResult.

    Usage:
        async with ContentAPIClient(token) as client:
            result = await PutOrchestrator(client).put(["a.txt", "b.iso"], "/backup")
            result.raise_for_failures()
    """

    def __init__(
        self,
        client: IStorageClient,
        chunk_size: int = CHUNK_SIZE,
        progress_factory: Optional[ProgressFactory] = None,
        handler: Optional[FileUploadHandler] = None,
    ):
        self._handler = handler or FileUploadHandler(
            client,
            chunk_size=chunk_size,
            progress_factory=progress_factory,
        )

    async def put(self, sources: Sequence[str], destination: Optional[str] = None) -> PutResult:
        """
        Upload every source, optionally under destination.

        Raises:
            NoOperandsError: sources is empty
        """
        if not sources:
            raise NoOperandsError()

        logger.info("Starting upload of %d file(s)", len(sources))
        tasks = [
            asyncio.create_task(self._upload_one(str(source), destination))
            for source in sources
        ]
        results = await asyncio.gather(*tasks)

        outcome = PutResult(results=list(results))
        logger.info(
            "Uploads complete: %d successful, %d failed",
            outcome.uploaded_files,
            outcome.failed_files,
        )
        return outcome

    async def _upload_one(self, source: str, destination: Optional[str]) -> UploadResult:
        try:
            return await self._handler.upload(source, destination)
        except Exception as exc:
            logger.error("Failed to upload %s: %s", source, exc)
            logger.debug("Upload failure details for %s", source, exc_info=True)
            return UploadResult.fail(source, exc)
