"""Persistence layer for journal entries."""
import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

import aiofiles

from src.journal.errors import JournalStorageError
from src.journal.models import JournalEntry

# Receives the stored entry, returns its replacement or None to leave it as is.
EntryMutator = Callable[[JournalEntry], JournalEntry | None]


class JournalStore(ABC):
    """Append-only record store behind the signal journal.

    Entries are never deleted or reordered; update replaces one entry in
    place under the store's write lock.
    """

    @abstractmethod
    async def append(self, entry: JournalEntry) -> None:
        """Append a new entry."""

    @abstractmethod
    async def update(self, entry_id: str, mutator: EntryMutator) -> JournalEntry | None:
        """Atomically apply mutator to the entry with entry_id.

        Returns:
            The replacement entry, or None if the entry does not exist or
            the mutator declined the change.
        """

    @abstractmethod
    async def read_all(self) -> list[JournalEntry]:
        """Return every entry in insertion order."""


class InMemoryJournalStore(JournalStore):
    """Store kept in process memory; contents are lost on exit."""

    def __init__(self, entries: list[JournalEntry] | None = None) -> None:
        self._entries: list[JournalEntry] = list(entries or [])
        self._lock = asyncio.Lock()

    async def append(self, entry: JournalEntry) -> None:
        async with self._lock:
            self._entries.append(entry)

    async def update(self, entry_id: str, mutator: EntryMutator) -> JournalEntry | None:
        async with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.id == entry_id:
                    replacement = mutator(entry)
                    if replacement is not None:
                        self._entries[index] = replacement
                    return replacement
            return None

    async def read_all(self) -> list[JournalEntry]:
        async with self._lock:
            return list(self._entries)


class JsonFileJournalStore(JournalStore):
    """Stores the journal as one JSON array file.

    Format: [{"id": ..., "timestamp": ..., "symbol": ..., "type": "BUY", ...}]
    Writes go to a temporary sibling file that then replaces the journal,
    so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: Path = Path("data/journal.json")) -> None:
        """Initialize the store.

        Args:
            path: Location of the journal JSON file.

        Raises:
            JournalStorageError: If the parent directory cannot be created.
        """
        self._path = Path(path)
        self._lock = asyncio.Lock()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise JournalStorageError(f"Cannot create journal directory {self._path.parent}: {e}") from e

    @property
    def path(self) -> Path:
        """Location of the journal file."""
        return self._path

    async def append(self, entry: JournalEntry) -> None:
        async with self._lock:
            records = await self._read_records()
            records.append(entry.to_dict())
            await self._write_records(records)

    async def update(self, entry_id: str, mutator: EntryMutator) -> JournalEntry | None:
        async with self._lock:
            records = await self._read_records()
            for index, record in enumerate(records):
                if str(record.get("id")) != entry_id:
                    continue
                replacement = mutator(self._decode(record))
                if replacement is not None:
                    records[index] = replacement.to_dict()
                    await self._write_records(records)
                return replacement
            return None

    async def read_all(self) -> list[JournalEntry]:
        async with self._lock:
            records = await self._read_records()
        return [self._decode(record) for record in records]

    async def _read_records(self) -> list[dict]:
        """Read raw records from the journal file."""
        if not self._path.exists():
            return []

        try:
            async with aiofiles.open(self._path, "r") as f:
                content = await f.read()
        except OSError as e:
            raise JournalStorageError(f"Cannot read journal {self._path}: {e}") from e

        if not content.strip():
            return []

        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise JournalStorageError(f"Corrupt journal {self._path}: {e}") from e

        if not isinstance(records, list):
            raise JournalStorageError(f"Corrupt journal {self._path}: expected a JSON array")
        return records

    async def _write_records(self, records: list[dict]) -> None:
        """Write raw records, replacing the journal file atomically."""
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            async with aiofiles.open(tmp_path, "w") as f:
                await f.write(json.dumps(records, indent=2))
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise JournalStorageError(f"Cannot write journal {self._path}: {e}") from e

    def _decode(self, record: dict) -> JournalEntry:
        try:
            return JournalEntry.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            raise JournalStorageError(f"Malformed journal record {record.get('id')}: {e}") from e
