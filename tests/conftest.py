"""Pytest configuration and shared fixtures."""
import itertools
from typing import Any, Dict, List, Optional, Tuple

import pytest

from cloudput.errors import StorageAPIError
from cloudput.models import CommitInfo


class FakeStorageClient:
    """
    In-memory storage service recording every call.

    Sessions enforce offsets the way the real service does, so an
    out-of-order or duplicated append is rejected.
    """

    def __init__(
        self,
        fail_ops: Optional[Dict[str, Exception]] = None,
        fail_paths: Optional[Dict[str, Exception]] = None,
    ):
        self.calls: List[Tuple[str, int]] = []
        self.commits: List[Tuple[str, CommitInfo]] = []
        self.objects: Dict[str, bytes] = {}
        self.sessions: Dict[str, bytearray] = {}
        self._fail_ops = fail_ops or {}
        self._fail_paths = fail_paths or {}
        self._ids = itertools.count(1)

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    def sent_bytes(self) -> int:
        return sum(size for _, size in self.calls)

    def _maybe_fail(self, op: str, path: Optional[str] = None) -> None:
        if op in self._fail_ops:
            raise self._fail_ops[op]
        if path is not None and path in self._fail_paths:
            raise self._fail_paths[path]

    async def session_start(self, data: bytes) -> str:
        self._maybe_fail("start")
        session_id = f"session-{next(self._ids)}"
        self.sessions[session_id] = bytearray(data)
        self.calls.append(("start", len(data)))
        return session_id

    async def session_append(self, session_id: str, offset: int, data: bytes) -> None:
        self._maybe_fail("append")
        buffer = self.sessions[session_id]
        if offset != len(buffer):
            raise StorageAPIError(409, "append", {"correct_offset": len(buffer)})
        buffer.extend(data)
        self.calls.append(("append", len(data)))

    async def session_finish(
        self,
        session_id: str,
        offset: int,
        commit: CommitInfo,
        data: bytes,
    ) -> Dict[str, Any]:
        self._maybe_fail("finish", commit.path)
        buffer = self.sessions.pop(session_id)
        if offset != len(buffer):
            raise StorageAPIError(409, "finish", {"correct_offset": len(buffer)})
        buffer.extend(data)
        self.calls.append(("finish", len(data)))
        self.commits.append(("finish", commit))
        self.objects[commit.path] = bytes(buffer)
        return {"path_display": commit.path, "size": len(buffer)}

    async def upload(self, commit: CommitInfo, data: bytes) -> Dict[str, Any]:
        self._maybe_fail("upload", commit.path)
        self.calls.append(("upload", len(data)))
        self.commits.append(("upload", commit))
        self.objects[commit.path] = bytes(data)
        return {"path_display": commit.path, "size": len(data)}


def pattern_bytes(size: int) -> bytes:
    """Deterministic payload; the prime period keeps chunk boundaries distinct."""
    block = bytes(range(251))
    return (block * (size // 251 + 1))[:size]


@pytest.fixture
def fake_client():
    return FakeStorageClient()


@pytest.fixture
def make_file(tmp_path):
    def _make(name: str, size: int = 0, data: Optional[bytes] = None):
        path = tmp_path / name
        path.write_bytes(data if data is not None else pattern_bytes(size))
        return path

    return _make
