# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""YAML-backed document collections.

Each collection lives in one file (``<data_dir>/<name>.yml``) and is kept in
memory after the first load. Mutations take the collection lock, change the
in-memory document and write the whole file atomically before releasing the
lock, so ``push``/``pull`` behave as single document updates even when
requests run concurrently in the threadpool.

The file is re-read whenever it was replaced behind our back (another
process, or scripts/create_account.py), so a write keeps documents another
writer added before it.
"""

from __future__ import annotations

import copy
import logging
import os
import re
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from todoapp.errors import Conflict

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_ID_RE.match(value))


def _matches(doc: dict, equals: Dict[str, Any]) -> bool:
    return all(doc.get(k) == v for k, v in equals.items())


class DocumentStore:
    def __init__(self, name: str, path: Optional[Path] = None):
        self.name = name
        self.path = Path(path) if path is not None else None
        self._lock = threading.RLock()
        self._stamp: Optional[Tuple[int, int, int]] = None
        self._docs: Dict[str, dict] = {}
        self._refresh()

    # ---------- persistence ----------

    def _file_stamp(self) -> Optional[Tuple[int, int, int]]:
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    def _refresh(self) -> None:
        """Reload the collection if another writer replaced the file since we last saw it.

        Called with the lock held, before every read and before every
        read-modify-write.
        """
        if self.path is None:
            return
        stamp = self._file_stamp()
        if stamp == self._stamp:
            return
        self._docs = self._load()
        self._stamp = stamp
        logger.debug("Reloaded %s from %s", self.name, self.path)

    def _load(self) -> Dict[str, dict]:
        if self.path is None or not self.path.exists():
            return {}
        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        items = (raw.get("documents") or []) if isinstance(raw, dict) else []
        out: Dict[str, dict] = {}
        for doc in items:
            if not isinstance(doc, dict) or not is_valid_id(doc.get("id")):
                continue
            out[doc["id"]] = doc
        return out

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"version": 1, "collection": self.name, "documents": list(self._docs.values())}
        fd, tmp = tempfile.mkstemp(prefix=f".{self.name}.", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                yaml.safe_dump(payload, fh, sort_keys=False, allow_unicode=True)
            os.replace(tmp, self.path)
            self._stamp = self._file_stamp()
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug("Wrote %d documents to %s", len(self._docs), self.path)

    # ---------- reads ----------

    def find(self, **equals: Any) -> List[dict]:
        with self._lock:
            self._refresh()
            return [copy.deepcopy(d) for d in self._docs.values() if _matches(d, equals)]

    def find_one(self, **equals: Any) -> Optional[dict]:
        with self._lock:
            self._refresh()
            for d in self._docs.values():
                if _matches(d, equals):
                    return copy.deepcopy(d)
        return None

    def find_by_id(self, doc_id: Any) -> Optional[dict]:
        if not is_valid_id(doc_id):
            return None
        with self._lock:
            self._refresh()
            d = self._docs.get(doc_id)
            return copy.deepcopy(d) if d is not None else None

    # ---------- writes ----------

    def insert(self, doc: dict, *, unique: Iterable[str] = ()) -> dict:
        """Insert a new document and return it with its generated ``id``.

        Raises Conflict if another document already holds the same value for
        any of the ``unique`` fields.
        """
        with self._lock:
            self._refresh()
            for field in unique:
                value = doc.get(field)
                if any(d.get(field) == value for d in self._docs.values()):
                    raise Conflict(f"{field} already in use")
            stored = copy.deepcopy(doc)
            stored["id"] = new_id()
            self._docs[stored["id"]] = stored
            self._flush()
            return copy.deepcopy(stored)

    def update(self, doc_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        if not is_valid_id(doc_id):
            return None
        with self._lock:
            self._refresh()
            d = self._docs.get(doc_id)
            if d is None:
                return None
            for k, v in fields.items():
                if k == "id":
                    continue
                d[k] = copy.deepcopy(v)
            self._flush()
            return copy.deepcopy(d)

    def delete(self, doc_id: Any) -> Optional[dict]:
        if not is_valid_id(doc_id):
            return None
        with self._lock:
            self._refresh()
            d = self._docs.pop(doc_id, None)
            if d is None:
                return None
            self._flush()
            return d

    def push(self, doc_id: Any, field: str, item: Any) -> bool:
        """Append ``item`` to the list at ``field``. False if the document is missing."""
        if not is_valid_id(doc_id):
            return False
        with self._lock:
            self._refresh()
            d = self._docs.get(doc_id)
            if d is None:
                return False
            d.setdefault(field, []).append(copy.deepcopy(item))
            self._flush()
            return True

    def pull(self, doc_id: Any, field: str, **match: Any) -> bool:
        """Remove every list item at ``field`` matching ``match``. False if the document is missing."""
        if not is_valid_id(doc_id):
            return False
        with self._lock:
            self._refresh()
            d = self._docs.get(doc_id)
            if d is None:
                return False
            items = d.get(field) or []
            kept = [i for i in items if not (isinstance(i, dict) and _matches(i, match))]
            if len(kept) != len(items):
                d[field] = kept
                self._flush()
            return True

    def set(self, doc_id: Any, field: str, value: Any) -> bool:
        if not is_valid_id(doc_id):
            return False
        with self._lock:
            self._refresh()
            d = self._docs.get(doc_id)
            if d is None:
                return False
            d[field] = copy.deepcopy(value)
            self._flush()
            return True
