"""Prompt library storage and the one-shot preset loader."""

from __future__ import annotations

import json
import logging
import threading

from pydantic import ValidationError

from director_studio.models.prompt_template import PromptTemplate
from director_studio.models.song_dna import utc_now_iso
from director_studio.services.local_storage import LocalStorage
from director_studio.services.prompt_presets import PRESET_MODEL, PRESET_PROMPTS

log = logging.getLogger(__name__)

STORAGE_KEY = "prompt-library-storage"


class PromptLibrary:
    """Prompts persisted as ``{"state": {"prompts": [...], "quickPrompts": [...]}}``."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def _read_state(self) -> dict | None:
        raw = self.storage.get_item(STORAGE_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            log.error("Error parsing stored prompt data: %s", e)
            return None
        if not isinstance(data, dict):
            log.error("Stored prompt data is not an object")
            return None
        return data

    def _write_state(self, data: dict) -> None:
        self.storage.set_item(STORAGE_KEY, json.dumps(data))

    def prompts(self) -> list[PromptTemplate]:
        data = self._read_state() or {}
        result = []
        for item in (data.get("state") or {}).get("prompts") or []:
            try:
                result.append(PromptTemplate.model_validate(item))
            except ValidationError as e:
                log.warning("Skipping invalid stored prompt: %s", e)
        return result

    def quick_prompts(self) -> list[PromptTemplate]:
        return [p for p in self.prompts() if p.is_quick_access]

    def stored_ids(self) -> set[str]:
        data = self._read_state() or {}
        return {
            p.get("id")
            for p in (data.get("state") or {}).get("prompts") or []
            if isinstance(p, dict)
        }

    def remove_duplicates(self) -> int:
        """Keep the first prompt per id and rebuild the quick-access list.

        Returns the number of prompts removed; storage is untouched when zero.
        """
        data = self._read_state()
        if data is None:
            return 0
        state = data.get("state") or {}
        existing = state.get("prompts") or []

        seen: set[str] = set()
        unique = []
        for prompt in existing:
            prompt_id = prompt.get("id")
            if prompt_id in seen:
                continue
            seen.add(prompt_id)
            unique.append(prompt)

        removed = len(existing) - len(unique)
        if removed:
            state["prompts"] = unique
            state["quickPrompts"] = [p for p in unique if p.get("isQuickAccess")]
            data["state"] = state
            self._write_state(data)
            log.info("Removed %d duplicate prompts", removed)
        return removed

    def add_prompts(self, prompts: list[PromptTemplate]) -> int:
        """Append prompts whose id is not stored yet; returns how many were added."""
        data = self._read_state() or {}
        state = data.setdefault("state", {})
        stored = state.setdefault("prompts", [])
        ids = {p.get("id") for p in stored}

        added = 0
        for prompt in prompts:
            if prompt.id in ids:
                continue
            stored.append(prompt.model_dump(by_alias=True))
            ids.add(prompt.id)
            added += 1

        state["quickPrompts"] = [p for p in stored if p.get("isQuickAccess")]
        self._write_state(data)
        return added


class PromptLoader:
    """Loads the preset prompts into a library at most once per process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, library: PromptLibrary) -> None:
        with self._lock:
            if self._initialized:
                return
            # A failure leaves _initialized unset so a later call retries.
            library.remove_duplicates()

            stored_ids = library.stored_ids()
            if any(preset.id in stored_ids for preset in PRESET_PROMPTS):
                log.info("Preset prompts already stored, skipping load")
                self._initialized = True
                return

            now = utc_now_iso()
            presets = [
                preset.model_copy(
                    update={
                        "metadata": {
                            "model": PRESET_MODEL,
                            "source": "preset",
                            "createdAt": now,
                            "updatedAt": now,
                        }
                    }
                )
                for preset in PRESET_PROMPTS
            ]
            added = library.add_prompts(presets)
            self._initialized = True
            log.info("Loaded %d preset prompts", added)


_loader: PromptLoader | None = None
_loader_lock = threading.Lock()


def get_prompt_loader() -> PromptLoader:
    global _loader
    with _loader_lock:
        if _loader is None:
            _loader = PromptLoader()
        return _loader


def reset_prompt_loader() -> None:
    """Drop the process-wide loader so the next call starts fresh."""
    global _loader
    with _loader_lock:
        _loader = None
