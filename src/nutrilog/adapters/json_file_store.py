"""JSON file storage for the profile and meals."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from nutrilog.domain.store import StoreDocument
from nutrilog.errors import StoreUnavailableError
from nutrilog.services.store import DocumentStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(DocumentStore):
    """Document store backed by a single JSON file."""

    path: Path
    _initialized: bool = field(default=False, init=False, repr=False)

    def initialize(self) -> None:
        """Create the file with default data if missing and validate it otherwise."""
        if self.path.exists():
            self._load()
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._dump(StoreDocument())
            _logger.info("Created data file at %s", self.path)
        self._initialized = True

    def read(self) -> StoreDocument:
        """Load the document from disk."""
        if not self._initialized:
            raise StoreUnavailableError("Database not initialized")
        return self._load()

    def write(self, document: StoreDocument) -> None:
        """Persist the document, replacing the file atomically."""
        if not self._initialized:
            raise StoreUnavailableError("Database not initialized")
        self._dump(document)

    def _load(self) -> StoreDocument:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreUnavailableError("Database could not be read") from exc
        if not raw.strip():
            return StoreDocument()
        try:
            return StoreDocument.model_validate_json(raw)
        except ValidationError as exc:
            _logger.error("Invalid data file %s: %s", self.path, exc)
            raise StoreUnavailableError("Database file is corrupt") from exc

    def _dump(self, document: StoreDocument) -> None:
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            tmp_path.write_text(document.to_json(), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise StoreUnavailableError("Database could not be written") from exc
