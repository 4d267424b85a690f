"""
Local Note Store.

Ordered list of notes persisted on the device under a single storage key,
most recent first. Authoritative when there is no session or when the
remote service cannot be reached.
"""

import logging
import uuid
from datetime import datetime, timezone

from notesync.client.storage import FileStorage, NOTES_KEY

logger = logging.getLogger("notesync.client.local_store")

CATEGORIES = ("general", "work", "personal", "ideas", "study")
DEFAULT_CATEGORY = "general"
DEFAULT_TITLE = "Untitled"

# Etat de réconciliation d'une note écrite sur l'appareil
LOCAL_ONLY = "local-only"
PENDING_PUSH = "pending-push"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_note_id() -> str:
    """Time-based UUID, also accepted by the server on create."""
    return str(uuid.uuid1())


def normalize_fields(fields: dict) -> dict:
    fields = dict(fields)
    if "title" in fields:
        fields["title"] = (fields["title"] or "").strip() or DEFAULT_TITLE
    if "content" in fields:
        fields["content"] = (fields["content"] or "").strip()
    if "category" in fields:
        category = (fields["category"] or DEFAULT_CATEGORY).lower()
        fields["category"] = category if category in CATEGORIES else DEFAULT_CATEGORY
    return fields


def filter_notes(notes, search=None, category=None, sort_by="date", order="desc") -> list[dict]:
    """Same narrowing and ordering rules as the remote listing: pinned notes first."""
    result = list(notes)
    if search:
        needle = search.casefold()
        result = [
            n for n in result
            if needle in (n.get("title") or "").casefold() or needle in (n.get("content") or "").casefold()
        ]
    if category and category != "all":
        result = [n for n in result if n.get("category") == category]

    if sort_by == "title":
        key = lambda n: (n.get("title") or "").casefold()
    else:
        key = lambda n: n.get("updated_at") or n.get("created_at") or ""
    result.sort(key=key, reverse=(order != "asc"))
    # tri stable: l'ordre demandé est conservé à l'intérieur de chaque groupe
    result.sort(key=lambda n: bool(n.get("is_pinned")), reverse=True)
    return result


class LocalNoteStore:
    def __init__(self, storage: FileStorage) -> None:
        self.storage = storage

    def _load(self) -> list[dict]:
        notes = self.storage.get_item(NOTES_KEY)
        if not isinstance(notes, list):
            # absent ou corrompu: liste vide
            return []
        return [n for n in notes if isinstance(n, dict) and n.get("id")]

    def _persist(self, notes: list[dict]) -> None:
        self.storage.set_item(NOTES_KEY, notes)

    def _find(self, notes, note_id):
        for index, note in enumerate(notes):
            if note["id"] == note_id:
                return index
        return None

    def all(self) -> list[dict]:
        """Every stored record, trashed ones included."""
        return self._load()

    def list(self) -> list[dict]:
        return [n for n in self._load() if not n.get("deleted_at")]

    def list_trash(self):
        trashed = [n for n in self._load() if n.get("deleted_at")]
        return sorted(trashed, key=lambda n: n["deleted_at"], reverse=True)

    def pending(self):
        return [n for n in self._load() if n.get("sync_state") == PENDING_PUSH]

    def get(self, note_id: str, include_trashed: bool = False) -> dict | None:
        notes = self._load()
        index = self._find(notes, note_id)
        if index is None or (notes[index].get("deleted_at") and not include_trashed):
            return None
        return notes[index]

    def save(self, note: dict, sync_state: str = LOCAL_ONLY) -> dict:
        """Merge into an existing record, or insert a new leading record.

        Without an id a new one is generated, so retrying that path creates
        a second note.
        """
        notes = self._load()
        fields = normalize_fields(note)
        note_id = fields.get("id")

        if note_id:
            index = self._find(notes, note_id)
            if index is not None:
                notes[index] = {**notes[index], **fields, "sync_state": sync_state, "updated_at": now_iso()}
                self._persist(notes)
                logger.debug("local_note_merged", extra={"note_id": note_id})
                return notes[index]

        stamp = now_iso()
        record = {
            "title": DEFAULT_TITLE,
            "content": "",
            "category": DEFAULT_CATEGORY,
            "is_pinned": False,
            "color": None,
            "image_url": None,
            "reminder_date": None,
            "tags": [],
            "created_at": stamp,
            "updated_at": stamp,
            "deleted_at": None,
        }
        record.update({k: v for k, v in fields.items() if v is not None})
        record["id"] = note_id or new_note_id()
        record["sync_state"] = sync_state

        notes.insert(0, record)
        self._persist(notes)
        logger.debug("local_note_inserted", extra={"note_id": record["id"]})
        return record

    def _mutate(self, note_id, apply, sync_state=None, active_only=False) -> dict | None:
        notes = self._load()
        index = self._find(notes, note_id)
        if index is None:
            return None
        # une note dans la corbeille ne sort que par restore
        if active_only and notes[index].get("deleted_at"):
            return None
        record = dict(notes[index])
        apply(record)
        if sync_state is not None:
            record["sync_state"] = sync_state
        notes[index] = record
        self._persist(notes)
        return record

    def update(self, note_id: str, fields: dict, sync_state: str | None = None) -> dict | None:
        changes = normalize_fields({k: v for k, v in fields.items() if k != "id"})

        def apply(record):
            record.update(changes)
            record["updated_at"] = now_iso()

        return self._mutate(note_id, apply, sync_state, active_only=True)

    def toggle_pin(self, note_id: str, sync_state: str | None = None) -> dict | None:
        def apply(record):
            record["is_pinned"] = not record.get("is_pinned", False)
            record["updated_at"] = now_iso()

        return self._mutate(note_id, apply, sync_state, active_only=True)

    def delete(self, note_id: str, sync_state: str | None = None) -> dict | None:
        """Move to the device trash; a trashed note keeps its first deletion time."""
        def apply(record):
            if not record.get("deleted_at"):
                record["deleted_at"] = now_iso()

        return self._mutate(note_id, apply, sync_state)

    def restore(self, note_id: str, sync_state: str | None = None) -> dict | None:
        def apply(record):
            record["deleted_at"] = None

        return self._mutate(note_id, apply, sync_state)

    def clear(self) -> None:
        self.storage.remove_item(NOTES_KEY)
