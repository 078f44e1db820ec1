"""
Protocols (Interfaces) for Dependency Inversion.

The orchestrator only needs the remote operations below; ContentAPIClient
implements them over HTTP and tests substitute in-memory fakes.
"""
from typing import Any, Callable, Dict, Protocol, runtime_checkable

from .models import CommitInfo


ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class IStorageClient(Protocol):
    """Interface for the remote upload operations."""

    async def session_start(self, data: bytes) -> str:
        """Open an upload session with the first chunk; return its id."""
        ...

    async def session_append(self, session_id: str, offset: int, data: bytes) -> None:
        """Append a chunk at offset to an open session."""
        ...

    async def session_finish(
        self,
        session_id: str,
        offset: int,
        commit: CommitInfo,
        data: bytes,
    ) -> Dict[str, Any]:
        """Send the tail, close the session and commit the object."""
        ...

    async def upload(self, commit: CommitInfo, data: bytes) -> Dict[str, Any]:
        """Upload a whole object in one request."""
        ...
