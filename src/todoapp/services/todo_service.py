# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from todoapp.errors import TodoNotFound, ValidationError
from todoapp.infra.document_store import DocumentStore


def _now_ms() -> int:
    return int(time.time() * 1000)


def to_public(doc: dict) -> dict:
    return {
        "id": doc["id"],
        "text": doc.get("text", ""),
        "completed": bool(doc.get("completed", False)),
        "completedAt": doc.get("completedAt"),
    }


def _clean_text(text: Any) -> str:
    t = str(text or "").strip()
    if not t:
        raise ValidationError("Todo text is required", [{"loc": ["text"], "msg": "must not be empty"}])
    return t


class TodoService:
    """CRUD over todo documents. Todos have no owner: any caller may touch any todo."""

    def __init__(self, documents: DocumentStore):
        self._docs = documents

    def create(self, text: str) -> dict:
        doc = self._docs.insert({"text": _clean_text(text), "completed": False, "completedAt": None})
        return to_public(doc)

    def list_all(self) -> List[dict]:
        return [to_public(d) for d in self._docs.find()]

    def get(self, todo_id: str) -> dict:
        doc = self._docs.find_by_id(todo_id)
        if doc is None:
            raise TodoNotFound(todo_id)
        return to_public(doc)

    def update(self, todo_id: str, *, text: Optional[str] = None, completed: Optional[bool] = None) -> dict:
        """Patch text and/or completion.

        ``completed=True`` stamps ``completedAt``; anything else marks the todo
        open and clears it.
        """
        fields: Dict[str, Any] = {}
        if text is not None:
            fields["text"] = _clean_text(text)
        if completed is True:
            fields["completed"] = True
            fields["completedAt"] = _now_ms()
        else:
            fields["completed"] = False
            fields["completedAt"] = None
        doc = self._docs.update(todo_id, fields)
        if doc is None:
            raise TodoNotFound(todo_id)
        return to_public(doc)

    def delete(self, todo_id: str) -> dict:
        doc = self._docs.delete(todo_id)
        if doc is None:
            raise TodoNotFound(todo_id)
        return to_public(doc)
