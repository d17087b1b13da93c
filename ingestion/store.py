"""
Document Store

Persistence interface for ingested documents plus a reference
implementation that keeps one JSON file per document on disk.
"""

import json
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import Document

logger = logging.getLogger(__name__)


def apply_dotted_update(record: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply a partial update to a nested record in place.

    Keys may address nested fields with dots, e.g.
    ``{'readingProgress.currentPage': 12}``. Missing intermediate
    objects are created.

    Args:
        record: Record to modify
        updates: Mapping of (possibly dotted) keys to new values

    Returns:
        The modified record
    """
    for key, value in updates.items():
        parts = key.split(".")
        target = record
        for part in parts[:-1]:
            child = target.get(part)
            if not isinstance(child, dict):
                child = {}
                target[part] = child
            target = child
        target[parts[-1]] = value
    return record


class DocumentStore(ABC):
    """Where the pipeline hands off finished documents."""

    @abstractmethod
    def create(self, document: Union[Document, Dict[str, Any]]) -> str:
        """Persist a new document and return its id."""

    @abstractmethod
    def get(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a stored document, or None if unknown."""

    @abstractmethod
    def update(self, document_id: str, updates: Dict[str, Any]) -> bool:
        """Apply a dotted-key partial update; False if the document is unknown."""


class JsonDocumentStore(DocumentStore):
    """Stores each document as ``<id>.json`` under a directory."""

    def __init__(self, directory: Union[str, Path] = "./data/documents"):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.lock = threading.RLock()

    def _path(self, document_id: str) -> Path:
        # ids are generated here or validated below, never raw paths
        return self.directory / f"{document_id}.json"

    @staticmethod
    def _valid_id(document_id: str) -> bool:
        try:
            uuid.UUID(str(document_id))
        except ValueError:
            return False
        return True

    def create(self, document: Union[Document, Dict[str, Any]]) -> str:
        record = document.to_dict() if isinstance(document, Document) else dict(document)

        document_id = str(uuid.uuid4())
        record['id'] = document_id
        if isinstance(document, Document):
            document.id = document_id

        with self.lock:
            self._write(document_id, record)

        logger.info(f"Stored document {document_id}: {record.get('title')}")
        return document_id

    def get(self, document_id: str) -> Optional[Dict[str, Any]]:
        if not self._valid_id(document_id):
            return None

        path = self._path(document_id)
        with self.lock:
            if not path.exists():
                return None
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)

    def update(self, document_id: str, updates: Dict[str, Any]) -> bool:
        with self.lock:
            record = self.get(document_id)
            if record is None:
                logger.warning(f"Cannot update unknown document {document_id}")
                return False

            apply_dotted_update(record, updates)
            record['updatedAt'] = datetime.now().isoformat()
            self._write(document_id, record)

        logger.debug(f"Updated document {document_id}: {sorted(updates)}")
        return True

    def list_ids(self) -> List[str]:
        return sorted(path.stem for path in self.directory.glob("*.json"))

    def _write(self, document_id: str, record: Dict[str, Any]):
        path = self._path(document_id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(record, f, indent=2, ensure_ascii=False)
        tmp_path.replace(path)
