"""Orchestrator package - coordinates multi-file uploads."""
from .core import PutOrchestrator
from .file_upload import FileUploadHandler
from .models import PutResult

__all__ = ["PutOrchestrator", "FileUploadHandler", "PutResult"]
