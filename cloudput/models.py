"""
Models for cloudput.

Immutable dataclasses describing what gets uploaded and how it went.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


CHUNK_SIZE = 1 << 24  # 16 MiB

DEFAULT_API_URL = "https://content.dropboxapi.com"


class WriteMode(Enum):
    """Remote write mode for a committed object."""
    ADD = "add"
    OVERWRITE = "overwrite"
    UPDATE = "update"


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


def utc_now_seconds() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True)
class UploadTarget:
    """A resolved local file and where it goes."""
    source_path: str
    destination_path: str
    size_bytes: int
    last_modified: datetime


@dataclass(frozen=True)
class CommitInfo:
    """
    Commit metadata for the object being created.

    Shared unchanged by single-shot and session uploads.
    """
    path: str
    client_modified: datetime
    mode: WriteMode = WriteMode.OVERWRITE
    autorename: bool = False
    mute: bool = False

    @property
    def client_modified_iso(self) -> str:
        stamp = self.client_modified.astimezone(timezone.utc)
        return stamp.strftime("%Y-%m-%dT%H:%M:%SZ")

    def to_api_arg(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "mode": self.mode.value,
            "autorename": self.autorename,
            "client_modified": self.client_modified_iso,
            "mute": self.mute,
        }


@dataclass
class SessionState:
    """
    Server-side upload session as seen by the driver.

    bytes_committed only moves after the remote side acknowledged the bytes.
    """
    session_id: str
    bytes_committed: int = 0

    def advance(self, nbytes: int) -> None:
        if nbytes <= 0:
            raise ValueError(f"cannot advance session by {nbytes} bytes")
        self.bytes_committed += nbytes

    def cursor(self) -> Dict[str, Any]:
        return {"session_id": self.session_id, "offset": self.bytes_committed}


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of one file upload."""
    source_path: str
    destination_path: Optional[str] = None
    status: UploadStatus = UploadStatus.SUCCESS
    size_bytes: int = 0
    chunked: bool = False
    error: Optional[BaseException] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @property
    def filename(self) -> str:
        return self.source_path.replace("\\", "/").rsplit("/", 1)[-1]

    @classmethod
    def ok(
        cls,
        target: UploadTarget,
        chunked: bool,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        return cls(
            source_path=target.source_path,
            destination_path=target.destination_path,
            status=UploadStatus.SUCCESS,
            size_bytes=target.size_bytes,
            chunked=chunked,
            metadata=dict(metadata or {}),
        )

    @classmethod
    def fail(cls, source_path: str, error: BaseException, destination_path: Optional[str] = None):
        return cls(
            source_path=source_path,
            destination_path=destination_path,
            status=UploadStatus.FAILED,
            error=error,
        )


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for the put command."""
    access_token: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: float = 300.0
    destination: Optional[str] = None
    force: bool = False  # accepted but overwrite is unconditional
    show_progress: bool = True
