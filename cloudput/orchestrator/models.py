"""Orchestrator data models."""
from dataclasses import dataclass, field
from typing import Dict, List

from ..errors import AggregateUploadError
from ..models import UploadResult


@dataclass
class PutResult:
    """Result of a multi-file put."""
    results: List[UploadResult] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.results)

    @property
    def uploaded(self) -> List[UploadResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[UploadResult]:
        return [r for r in self.results if not r.success]

    @property
    def uploaded_files(self) -> int:
        return len(self.uploaded)

    @property
    def failed_files(self) -> int:
        return len(self.failed)

    @property
    def all_success(self) -> bool:
        return self.failed_files == 0

    @property
    def errors(self) -> Dict[str, BaseException]:
        return {r.source_path: r.error for r in self.failed}

    def raise_for_failures(self) -> None:
        if not self.all_success:
            raise AggregateUploadError(self.errors)
