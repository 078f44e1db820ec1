"""
cloudput - upload local files to cloud storage.

Small files go up in one request, large ones through a start/append/finish
upload session. Many files upload concurrently and every failure is reported.

Usage:
    from cloudput import ContentAPIClient, PutOrchestrator

    async with ContentAPIClient(access_token) as client:
        result = await PutOrchestrator(client).put(["notes.txt", "disk.img"], "/backup")
        result.raise_for_failures()
"""
from .errors import (
    AggregateUploadError,
    CloudPutError,
    NoOperandsError,
    PathValidationError,
    SessionAppendError,
    SessionError,
    SessionFinishError,
    SessionStartError,
    SingleShotUploadError,
    SourceOpenError,
    SourceStatError,
    StorageAPIError,
)
from .models import (
    CHUNK_SIZE,
    CommitInfo,
    SessionState,
    UploadConfig,
    UploadResult,
    UploadStatus,
    UploadTarget,
    WriteMode,
)
from .orchestrator import FileUploadHandler, PutOrchestrator, PutResult
from .services import ChunkedSessionDriver, ContentAPIClient, ProgressReader

__version__ = "0.1.0"
__all__ = [
    # Main
    "PutOrchestrator",
    "PutResult",
    "FileUploadHandler",
    # Models
    "CHUNK_SIZE",
    "CommitInfo",
    "SessionState",
    "UploadConfig",
    "UploadResult",
    "UploadStatus",
    "UploadTarget",
    "WriteMode",
    # Services
    "ChunkedSessionDriver",
    "ContentAPIClient",
    "ProgressReader",
    # Errors
    "AggregateUploadError",
    "CloudPutError",
    "NoOperandsError",
    "PathValidationError",
    "SessionAppendError",
    "SessionError",
    "SessionFinishError",
    "SessionStartError",
    "SingleShotUploadError",
    "SourceOpenError",
    "SourceStatError",
    "StorageAPIError",
]
