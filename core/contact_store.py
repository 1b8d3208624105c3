"""
Contact Store

Append-only JSON array of contact submissions kept in a single file.
Every append rewrites the whole array; writes are serialised with an
in-process asyncio lock plus an inter-process file lock so concurrent
submissions never overwrite each other.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

import fasteners

from core.error_handling import StorageError

logger = logging.getLogger(__name__)

EMPTY_STORE = "[]"


class ContactStore:
    """JSON-file backed, append-only list of contact records."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"ContactStore({str(self.path)!r})"

    # ------------------------------------------------------------------
    # Synchronous primitives (run in a worker thread by the async API)
    # ------------------------------------------------------------------

    def ensure_sync(self) -> None:
        """Create the data directory and an empty array file if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text(EMPTY_STORE, encoding="utf-8")
            logger.info(f"Created contact store at {self.path}")

    def _read_sync(self) -> List[Dict[str, Any]]:
        raw = self.path.read_bytes()
        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            parsed = None

        if isinstance(parsed, list):
            return parsed

        logger.warning(f"Contact store {self.path} is not a JSON array, resetting to []")
        self.path.write_text(EMPTY_STORE, encoding="utf-8")
        return []

    def _write_sync(self, contacts: List[Dict[str, Any]]) -> None:
        payload = json.dumps(contacts, indent=2, ensure_ascii=False) + "\n"
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def read_all_sync(self) -> List[Dict[str, Any]]:
        self.ensure_sync()
        with fasteners.InterProcessLock(str(self.lock_path)):
            return self._read_sync()

    def append_sync(self, record: Dict[str, Any]) -> int:
        """Append ``record`` and return the new number of stored records."""
        self.ensure_sync()
        with fasteners.InterProcessLock(str(self.lock_path)):
            contacts = self._read_sync()
            contacts.append(record)
            self._write_sync(contacts)
            return len(contacts)

    # ------------------------------------------------------------------
    # Async API used by request handlers
    # ------------------------------------------------------------------

    async def ensure(self) -> None:
        try:
            await asyncio.to_thread(self.ensure_sync)
        except OSError as e:
            raise StorageError(
                f"Unable to initialise contact store: {e}",
                component="contact_store",
                context={"path": str(self.path)},
            ) from e

    async def read_all(self) -> List[Dict[str, Any]]:
        async with self._lock:
            try:
                return await asyncio.to_thread(self.read_all_sync)
            except OSError as e:
                raise StorageError(
                    f"Unable to read contact store: {e}",
                    component="contact_store",
                    context={"path": str(self.path)},
                ) from e

    async def append(self, record: Dict[str, Any]) -> int:
        async with self._lock:
            try:
                total = await asyncio.to_thread(self.append_sync, record)
            except (OSError, TypeError, ValueError) as e:
                raise StorageError(
                    f"Unable to append to contact store: {e}",
                    component="contact_store",
                    context={"path": str(self.path)},
                ) from e
        logger.debug(f"Contact store {self.path} now holds {total} records")
        return total
