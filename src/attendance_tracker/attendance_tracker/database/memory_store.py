from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator


@dataclass
class EntityTable:
    """One entity map plus its monotonic id counter."""

    rows: Dict[int, Any] = field(default_factory=dict)
    next_id: int = 1

    def allocate_id(self) -> int:
        new_id = self.next_id
        self.next_id += 1
        return new_id


class MemoryStore:
    """In-process store shared by the memory repositories.

    Intended for tests and demos. Every repository call runs under one
    re-entrant lock, so a multi-step write (student insert plus course
    counter bumps) is atomic with respect to other requests.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.users = EntityTable()
        self.students = EntityTable()
        self.courses = EntityTable()
        self.attendances = EntityTable()

    @contextmanager
    def read(self) -> Iterator["MemoryStore"]:
        """Hold the lock without taking a snapshot."""

        with self._lock:
            yield self

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        """Hold the lock; on error restore every table to its previous state."""

        with self._lock:
            snapshot = {
                name: (dict(table.rows), table.next_id)
                for name, table in self._tables().items()
            }
            try:
                yield self
            except Exception:
                for name, (rows, next_id) in snapshot.items():
                    table = self._tables()[name]
                    table.rows = rows
                    table.next_id = next_id
                raise

    def _tables(self) -> Dict[str, EntityTable]:
        return {
            "users": self.users,
            "students": self.students,
            "courses": self.courses,
            "attendances": self.attendances,
        }
