"""Artist bank: saved artist profiles plus the currently active one."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from director_studio.models.artist import ArtistProfile, merge_artist
from director_studio.models.song_dna import utc_now_iso
from director_studio.services.local_storage import LocalStorage

log = logging.getLogger(__name__)

BANK_KEY = "dsvb:artistbank"
ACTIVE_KEY = "dsvb:active-artist"


class ArtistBank:
    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def all(self) -> list[ArtistProfile]:
        raw = self.storage.get_item(BANK_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("artist bank is not a list")
            return [ArtistProfile.model_validate(item) for item in data]
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            log.warning("Artist bank is corrupt, treating as empty: %s", e)
            return []

    def _write(self, artists: list[ArtistProfile]) -> None:
        self.storage.set_item(BANK_KEY, json.dumps([a.model_dump() for a in artists]))

    def get(self, artist_id: str) -> ArtistProfile | None:
        return next((a for a in self.all() if a.artist_id == artist_id), None)

    def save(self, artist: ArtistProfile) -> ArtistProfile:
        """Insert or replace a profile by ``artist_id`` and stamp its timestamps."""
        artists = self.all()
        now = utc_now_iso()
        existing = next((a for a in artists if a.artist_id == artist.artist_id), None)

        meta = artist.meta.model_copy(
            update={
                "created_at": artist.meta.created_at
                or (existing.meta.created_at if existing else None)
                or now,
                "updated_at": now,
            }
        )
        artist = artist.model_copy(update={"meta": meta})

        if existing is None:
            artists.append(artist)
            log.info("Added artist %s (%s)", artist.artist_name, artist.artist_id)
        else:
            artists = [artist if a.artist_id == artist.artist_id else a for a in artists]
            log.info("Updated artist %s (%s)", artist.artist_name, artist.artist_id)
        self._write(artists)
        return artist

    def delete(self, artist_id: str) -> bool:
        artists = self.all()
        remaining = [a for a in artists if a.artist_id != artist_id]
        if len(remaining) == len(artists):
            return False
        self._write(remaining)
        active = self.get_active()
        if active is not None and active.artist_id == artist_id:
            self.storage.remove_item(ACTIVE_KEY)
        log.info("Deleted artist %s", artist_id)
        return True

    def get_active(self) -> ArtistProfile | None:
        raw = self.storage.get_item(ACTIVE_KEY)
        if not raw:
            return None
        try:
            return ArtistProfile.model_validate_json(raw)
        except ValidationError as e:
            log.warning("Active artist entry is corrupt: %s", e)
            return None

    def set_active(self, artist: ArtistProfile | None) -> None:
        if artist is None:
            self.storage.remove_item(ACTIVE_KEY)
        else:
            self.storage.set_item(ACTIVE_KEY, artist.model_dump_json())

    def export_json(self) -> str:
        return json.dumps([a.model_dump() for a in self.all()], indent=2)

    def import_json(self, json_data: str) -> list[ArtistProfile]:
        """Merge an exported bank into this one.

        Known artists only gain fields they are missing; new artists are added.
        """
        try:
            incoming = json.loads(json_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to import artists: {e}") from e
        if isinstance(incoming, dict):
            incoming = [incoming]
        if not isinstance(incoming, list):
            raise ValueError("Failed to import artists: expected a list of profiles")

        artists = {a.artist_id: a for a in self.all()}
        for item in incoming:
            try:
                profile = ArtistProfile.model_validate(item)
            except ValidationError as e:
                raise ValueError(f"Failed to import artists: {e}") from e
            if profile.artist_id in artists:
                artists[profile.artist_id] = merge_artist(artists[profile.artist_id], item)
            else:
                artists[profile.artist_id] = profile

        merged = list(artists.values())
        self._write(merged)
        log.info("Imported %d artist profiles", len(incoming))
        return merged
