import json

import pytest

from director_studio.models.prompt_template import PromptTemplate
from director_studio.services.local_storage import MemoryLocalStorage
from director_studio.services.prompt_library import (
    STORAGE_KEY,
    PromptLibrary,
    PromptLoader,
    get_prompt_loader,
    reset_prompt_loader,
)
from director_studio.services.prompt_presets import PRESET_MODEL, PRESET_PROMPTS


class FlakyStorage(MemoryLocalStorage):
    """Memory storage whose first write fails."""

    def __init__(self):
        super().__init__()
        self.failures = 1

    def set_item(self, key, value):
        if self.failures:
            self.failures -= 1
            raise OSError("disk full")
        super().set_item(key, value)


def stored_state(storage):
    return json.loads(storage.get_item(STORAGE_KEY))["state"]


class TestPromptLoader:
    def test_loads_presets(self, storage):
        """Test that every preset is stored with preset metadata."""
        library = PromptLibrary(storage)
        PromptLoader().initialize(library)

        prompts = library.prompts()
        assert len(prompts) == 9
        assert len(library.quick_prompts()) == 5
        assert all(p.metadata["source"] == "preset" for p in prompts)
        assert all(p.metadata["model"] == PRESET_MODEL for p in prompts)
        state = stored_state(storage)
        assert state["prompts"][0]["categoryId"] == "cinematic"
        assert len(state["quickPrompts"]) == 5

    def test_runs_once(self, storage):
        """Test that a second initialize on the same loader is a no-op."""
        library = PromptLibrary(storage)
        loader = PromptLoader()
        loader.initialize(library)
        storage.clear()
        loader.initialize(library)
        assert loader.initialized
        assert library.prompts() == []

    def test_skips_when_presets_stored(self, storage):
        """Test that a library already holding a preset is left alone."""
        library = PromptLibrary(storage)
        library.add_prompts([PRESET_PROMPTS[0]])
        PromptLoader().initialize(library)
        assert [p.id for p in library.prompts()] == [PRESET_PROMPTS[0].id]

    def test_keeps_user_prompts(self, storage):
        """Test that presets are appended after existing user prompts."""
        library = PromptLibrary(storage)
        library.add_prompts([PromptTemplate(id="user-1", title="Mine", prompt="rainy street")])
        PromptLoader().initialize(library)
        ids = [p.id for p in library.prompts()]
        assert ids[0] == "user-1"
        assert len(ids) == 10

    def test_retries_after_failure(self):
        """Test that a failed load leaves the loader uninitialized."""
        storage = FlakyStorage()
        library = PromptLibrary(storage)
        loader = PromptLoader()
        with pytest.raises(OSError):
            loader.initialize(library)
        assert not loader.initialized

        loader.initialize(library)
        assert loader.initialized
        assert len(library.prompts()) == 9

    def test_singleton(self):
        """Test the process-wide loader and its reset."""
        loader = get_prompt_loader()
        assert get_prompt_loader() is loader
        reset_prompt_loader()
        assert get_prompt_loader() is not loader


class TestPromptLibrary:
    def test_remove_duplicates(self, storage):
        """Test that the first prompt per id wins and quick prompts are rebuilt."""
        first = {"id": "p1", "title": "One", "prompt": "a", "isQuickAccess": True}
        duplicate = {"id": "p1", "title": "Copy", "prompt": "b", "isQuickAccess": True}
        other = {"id": "p2", "title": "Two", "prompt": "c"}
        storage.set_item(
            STORAGE_KEY,
            json.dumps({"state": {"prompts": [first, duplicate, other], "quickPrompts": []}}),
        )
        library = PromptLibrary(storage)

        assert library.remove_duplicates() == 1
        assert [p.title for p in library.prompts()] == ["One", "Two"]
        assert [p["id"] for p in stored_state(storage)["quickPrompts"]] == ["p1"]
        assert library.remove_duplicates() == 0

    def test_corrupt_storage(self, storage):
        """Test that unreadable storage reads as an empty library."""
        storage.set_item(STORAGE_KEY, "{nope")
        library = PromptLibrary(storage)
        assert library.prompts() == []
        assert library.remove_duplicates() == 0

    def test_add_prompts_skips_known_ids(self, storage):
        """Test that add_prompts never stores an id twice."""
        library = PromptLibrary(storage)
        prompt = PromptTemplate(id="p1", title="One", prompt="a")
        assert library.add_prompts([prompt, prompt]) == 1
        assert library.add_prompts([prompt]) == 0
        assert len(library.prompts()) == 1
