"""Base importer infrastructure: ImportResult dataclass and BaseImporter ABC."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from ..core.models import Transaction


@dataclass
class ImportResult:
    source: str
    transactions: list[Transaction] = field(default_factory=list)
    rows_skipped: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def rows_imported(self) -> int:
        return len(self.transactions)


class BaseImporter(ABC):
    SOURCE_PREFIX: str  # "csv", etc.

    def __init__(self, assets: dict[str, dict] | None = None, strict: bool = False):
        self.assets = assets
        self.strict = strict

    def run(self, path) -> ImportResult:
        """Read `path` into transactions. Bad rows become warnings unless strict."""
        path = Path(path)
        result = ImportResult(source=f"{self.SOURCE_PREFIX}:{path.name}")
        self._run_import(path, result)
        return result

    @abstractmethod
    def _run_import(self, path: Path, result: ImportResult) -> None: ...
