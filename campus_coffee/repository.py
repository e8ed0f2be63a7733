"""
POS persistence

PosRepository is the port the service talks to. InMemoryPosRepository is
the bundled implementation, optionally backed by a JSON file.
"""

import json
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger

from .exceptions import DuplicatePosNameException, PosNotFoundException
from .models import Pos


class PosRepository(ABC):
    """Owns persisted POS records; names are unique"""

    @abstractmethod
    def find_by_id(self, pos_id: int) -> Optional[Pos]:
        ...

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Pos]:
        ...

    @abstractmethod
    def find_all(self) -> List[Pos]:
        ...

    @abstractmethod
    def upsert(self, pos: Pos) -> Pos:
        """
        Create (no id) or update (existing id) a POS

        Raises:
            PosNotFoundException: id is set but unknown
            DuplicatePosNameException: another POS already has this name
        """

    @abstractmethod
    def delete_all(self) -> None:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class InMemoryPosRepository(PosRepository):
    """Dict-backed repository, safe to share between threads"""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[int, Pos] = {}
        self._next_id = 1

    def find_by_id(self, pos_id: int) -> Optional[Pos]:
        with self._lock:
            return self._records.get(pos_id)

    def find_by_name(self, name: str) -> Optional[Pos]:
        with self._lock:
            return self._find_by_name(name)

    def find_all(self) -> List[Pos]:
        with self._lock:
            return [self._records[key] for key in sorted(self._records)]

    def upsert(self, pos: Pos) -> Pos:
        with self._lock:
            now = datetime.now()
            clash = self._find_by_name(pos.name)
            if clash is not None and clash.id != pos.id:
                raise DuplicatePosNameException(pos.name)

            if pos.id is None:
                saved = pos.model_copy(update={"id": self._next_id, "created_at": now, "updated_at": now})
                self._next_id += 1
            else:
                existing = self._records.get(pos.id)
                if existing is None:
                    raise PosNotFoundException(pos.id)
                saved = pos.model_copy(update={"created_at": existing.created_at, "updated_at": now})

            self._records[saved.id] = saved
            return saved

    def delete_all(self) -> None:
        with self._lock:
            self._records.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def _find_by_name(self, name: str) -> Optional[Pos]:
        for record in self._records.values():
            if record.name == name:
                return record
        return None

    # ------------------------------------------------------------
    # JSON file persistence
    # ------------------------------------------------------------

    @classmethod
    def load(cls, path: str) -> "InMemoryPosRepository":
        """Load records from a JSON file; a missing file gives an empty repository"""
        repository = cls()
        if not os.path.exists(path):
            return repository
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        for item in data:
            pos = Pos.model_validate(item)
            if pos.id is None:
                raise ValueError(f"POS record without id in {path}: {pos.name!r}")
            repository._records[pos.id] = pos
        if repository._records:
            repository._next_id = max(repository._records) + 1
        logger.info(f"Loaded {len(repository._records)} POS from {path}")
        return repository

    def save(self, path: str) -> None:
        """Write all records to a JSON file"""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        data = [pos.model_dump(mode="json") for pos in self.find_all()]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"Saved {len(data)} POS to {path}")
