"""Services for cloudput."""
from .api_client import ContentAPIClient
from .reader import ProgressReader
from .session import ChunkedSessionDriver

__all__ = [
    "ContentAPIClient",
    "ProgressReader",
    "ChunkedSessionDriver",
]
