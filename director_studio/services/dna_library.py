"""Library of saved Song DNA records."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from director_studio.models.song_dna import (
    SongDNA,
    StoredDNAMetadata,
    StoredSongDNA,
    new_dna_id,
    utc_now_iso,
)
from director_studio.services.local_storage import LocalStorage

log = logging.getLogger(__name__)

STORAGE_KEY = "song-dna-db"
EXPORT_VERSION = "2.0"


class DNANotFoundError(KeyError):
    """Raised when a DNA id is not in the library."""


class SongDNALibrary:
    """Stores ``{id: StoredSongDNA}`` as one JSON blob under ``song-dna-db``."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def _load(self) -> dict[str, StoredSongDNA]:
        raw = self.storage.get_item(STORAGE_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
            return {key: StoredSongDNA.model_validate(value) for key, value in data.items()}
        except (json.JSONDecodeError, ValidationError, AttributeError) as e:
            log.warning("Song DNA library is corrupt, treating as empty: %s", e)
            return {}

    def _store(self, records: dict[str, StoredSongDNA]) -> None:
        payload = {key: record.model_dump() for key, record in records.items()}
        self.storage.set_item(STORAGE_KEY, json.dumps(payload))

    def save(
        self,
        dna: SongDNA,
        title: str | None = None,
        artist: str | None = None,
        tags: list[str] | None = None,
        notes: str | None = None,
    ) -> str:
        """Save (or overwrite) a DNA and return its id."""
        records = self._load()
        dna_id = dna.id or new_dna_id()
        now = utc_now_iso()
        records[dna_id] = StoredSongDNA(
            id=dna_id,
            dna=dna,
            metadata=StoredDNAMetadata(
                title=title or dna.reference_song.title or "Untitled",
                artist=artist or dna.reference_song.artist or "Unknown",
                saved_at=now,
                last_modified=now,
                tags=tags or [],
                notes=notes,
                analysis_version=dna.analysis_version or "2.0-enhanced",
            ),
        )
        self._store(records)
        log.info("Saved song DNA %s", dna_id)
        return dna_id

    def get(self, dna_id: str) -> StoredSongDNA | None:
        return self._load().get(dna_id)

    def get_all(self) -> list[StoredSongDNA]:
        """All records, newest first."""
        records = list(self._load().values())
        order = {record.id: i for i, record in enumerate(records)}
        return sorted(
            records,
            key=lambda r: (r.metadata.saved_at, order[r.id]),
            reverse=True,
        )

    def search_by_artist(self, artist: str) -> list[StoredSongDNA]:
        return [r for r in self.get_all() if r.metadata.artist == artist]

    def search_by_tag(self, tag: str) -> list[StoredSongDNA]:
        return [r for r in self.get_all() if tag in r.metadata.tags]

    def update(self, dna_id: str, updates: dict[str, Any]) -> StoredSongDNA:
        """Apply ``{"dna": ..., "metadata": {...}}`` updates; the id never changes."""
        records = self._load()
        existing = records.get(dna_id)
        if existing is None:
            raise DNANotFoundError(dna_id)

        data = existing.model_dump()
        if "dna" in updates:
            dna = updates["dna"]
            data["dna"] = dna.model_dump() if isinstance(dna, SongDNA) else dna
        data["metadata"].update(updates.get("metadata") or {})
        data["metadata"]["last_modified"] = utc_now_iso()
        data["id"] = dna_id

        updated = StoredSongDNA.model_validate(data)
        records[dna_id] = updated
        self._store(records)
        log.info("Updated song DNA %s", dna_id)
        return updated

    def delete(self, dna_id: str) -> bool:
        records = self._load()
        if records.pop(dna_id, None) is None:
            return False
        self._store(records)
        log.info("Deleted song DNA %s", dna_id)
        return True

    def export_dna(self, dna_id: str) -> str:
        stored = self.get(dna_id)
        if stored is None:
            raise DNANotFoundError(dna_id)
        lyrical = stored.dna.lyrical
        export = {
            "version": EXPORT_VERSION,
            "exported_at": utc_now_iso(),
            "source": {
                "title": stored.metadata.title,
                "artist": stored.metadata.artist,
                "analyzed_at": stored.metadata.saved_at,
            },
            "dna": stored.dna.model_dump(),
            "metadata": {
                "syllable_pattern": lyrical.syllables_per_line.distribution[:16],
                "rhyme_schemes": lyrical.rhyme_schemes,
                "flow_type": stored.dna.production_notes,
                "tags": stored.metadata.tags,
                "notes": stored.metadata.notes,
            },
        }
        return json.dumps(export, indent=2)

    def import_dna(self, json_data: str) -> str:
        """Import an exported DNA document and return the saved id."""
        try:
            imported = json.loads(json_data)
            if not isinstance(imported, dict) or not imported.get("dna") or not imported.get("version"):
                raise ValueError("Invalid DNA format")
            dna = SongDNA.model_validate(imported["dna"])
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            raise ValueError(f"Failed to import DNA: {e}") from e

        source = imported.get("source")
        source = source if isinstance(source, dict) else {}
        metadata = imported.get("metadata")
        metadata = metadata if isinstance(metadata, dict) else {}
        tags = metadata.get("tags")
        return self.save(
            dna,
            title=source.get("title") or dna.reference_song.title or "Imported",
            artist=source.get("artist") or dna.reference_song.artist or "Unknown",
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
            notes=metadata.get("notes") or f"Imported from {source.get('title') or 'unknown source'}",
        )

    def export_all(self) -> str:
        records = self.get_all()
        export = {
            "version": EXPORT_VERSION,
            "exported_at": utc_now_iso(),
            "count": len(records),
            "dna_collection": [
                {"id": r.id, "metadata": r.metadata.model_dump(), "dna": r.dna.model_dump()}
                for r in records
            ],
        }
        return json.dumps(export, indent=2)

    def clear(self) -> None:
        self.storage.remove_item(STORAGE_KEY)
