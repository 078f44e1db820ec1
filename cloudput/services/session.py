"""
Chunked Session Driver.

Uploads a large byte stream as start, zero or more appends and a finish
that commits whatever is left. No retries: the first failure aborts.
"""
import logging
from typing import Any, Dict

from ..errors import (
    SessionAppendError,
    SessionFinishError,
    SessionStartError,
    describe_exception,
)
from ..models import CHUNK_SIZE, CommitInfo, SessionState
from ..protocols import IStorageClient
from .reader import ProgressReader

logger = logging.getLogger(__name__)


class ChunkedSessionDriver:
    """Drives one upload session for one file."""

    def __init__(self, client: IStorageClient, chunk_size: int = CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._client = client
        self._chunk_size = chunk_size

    async def upload(
        self,
        reader: ProgressReader,
        commit: CommitInfo,
        total_size: int,
    ) -> Dict[str, Any]:
        """
        Upload total_size bytes from reader through a session.

        Args:
            reader: Stream positioned at the first byte
            commit: Commit metadata for the final object
            total_size: Stream length; must exceed the chunk size

        Returns:
            Metadata of the committed object
        """
        if total_size <= self._chunk_size:
            raise ValueError(
                f"session upload needs more than {self._chunk_size} bytes, got {total_size}"
            )

        state = await self._start(reader, commit)

        while total_size - state.bytes_committed > self._chunk_size:
            await self._append(reader, commit, state)

        return await self._finish(reader, commit, state, total_size)

    async def _start(self, reader: ProgressReader, commit: CommitInfo) -> SessionState:
        data = await reader.read_async(self._chunk_size)
        if len(data) != self._chunk_size:
            raise SessionStartError(
                f"short read for {commit.path}: expected {self._chunk_size} bytes, got {len(data)}"
            )
        try:
            session_id = await self._client.session_start(data)
        except Exception as exc:
            raise SessionStartError(
                f"could not start session for {commit.path}: {describe_exception(exc)}"
            ) from exc

        logger.debug("Session %s started for %s", session_id, commit.path)
        state = SessionState(session_id=session_id)
        state.advance(len(data))
        return state

    async def _append(
        self,
        reader: ProgressReader,
        commit: CommitInfo,
        state: SessionState,
    ) -> None:
        offset = state.bytes_committed
        data = await reader.read_async(self._chunk_size)
        if len(data) != self._chunk_size:
            raise SessionAppendError(
                f"short read for {commit.path} at offset {offset}: "
                f"expected {self._chunk_size} bytes, got {len(data)}",
                session_id=state.session_id,
                offset=offset,
            )
        try:
            await self._client.session_append(state.session_id, offset, data)
        except Exception as exc:
            raise SessionAppendError(
                f"append at offset {offset} failed for {commit.path}: {describe_exception(exc)}",
                session_id=state.session_id,
                offset=offset,
            ) from exc

        state.advance(len(data))
        logger.debug("Session %s committed %d bytes", state.session_id, state.bytes_committed)

    async def _finish(
        self,
        reader: ProgressReader,
        commit: CommitInfo,
        state: SessionState,
        total_size: int,
    ) -> Dict[str, Any]:
        offset = state.bytes_committed
        expected = total_size - offset
        data = await reader.read_async(expected)
        if len(data) != expected:
            raise SessionFinishError(
                f"short read for {commit.path} at offset {offset}: "
                f"expected {expected} bytes, got {len(data)}",
                session_id=state.session_id,
                offset=offset,
            )
        try:
            metadata = await self._client.session_finish(state.session_id, offset, commit, data)
        except Exception as exc:
            raise SessionFinishError(
                f"finish at offset {offset} failed for {commit.path}: {describe_exception(exc)}",
                session_id=state.session_id,
                offset=offset,
            ) from exc

        logger.debug("Session %s finished: %s (%d bytes)", state.session_id, commit.path, total_size)
        return metadata or {}
