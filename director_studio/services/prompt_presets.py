"""Preset image prompts tuned for the nano-banana image model."""

from __future__ import annotations

from director_studio.models.prompt_template import PromptTemplate

PRESET_MODEL = "nano-banana"

PROMPT_CATEGORIES = [
    {"id": "cinematic", "name": "Cinematic Shots"},
    {"id": "characters", "name": "Character Styles"},
    {"id": "lighting", "name": "Lighting Setups"},
    {"id": "environments", "name": "Environments"},
    {"id": "effects", "name": "Special Effects"},
    {"id": "moods", "name": "Moods & Atmosphere"},
    {"id": "camera", "name": "Camera Angles"},
    {"id": "styles", "name": "Art Styles"},
]

PRESET_PROMPTS: list[PromptTemplate] = [
    PromptTemplate(
        id="cin-001",
        title="Epic Wide Shot",
        prompt=(
            "cinematic wide shot, epic scale, dramatic lighting, anamorphic lens flare, "
            "film grain, 70mm IMAX, professional cinematography"
        ),
        category_id="cinematic",
        tags=["wide", "epic", "dramatic"],
        is_quick_access=True,
        reference="Dune, Lawrence of Arabia style cinematography",
    ),
    PromptTemplate(
        id="cin-002",
        title="Intimate Close-Up",
        prompt=(
            "extreme close-up shot, shallow depth of field, bokeh, intimate lighting, "
            "emotional portrait, cinematic color grading"
        ),
        category_id="cinematic",
        tags=["closeup", "portrait", "intimate"],
        is_quick_access=True,
    ),
    PromptTemplate(
        id="cin-003",
        title="Action Sequence",
        prompt=(
            "dynamic action shot, motion blur, high speed cinematography, dramatic angles, "
            "intense movement, cinematic tension"
        ),
        category_id="cinematic",
        tags=["action", "dynamic", "motion"],
    ),
    PromptTemplate(
        id="char-001",
        title="Hero Portrait",
        prompt=(
            "@character heroic pose, confident expression, dramatic backlighting, "
            "superhero aesthetic, powerful stance, cinematic portrait"
        ),
        category_id="characters",
        tags=["hero", "portrait", "powerful"],
        is_quick_access=True,
    ),
    PromptTemplate(
        id="char-002",
        title="Villain Reveal",
        prompt=(
            "@character sinister expression, dramatic shadows, low key lighting, "
            "menacing presence, dark atmosphere, villain aesthetic"
        ),
        category_id="characters",
        tags=["villain", "dark", "menacing"],
    ),
    PromptTemplate(
        id="light-001",
        title="Golden Hour Magic",
        prompt=(
            "golden hour lighting, warm tones, long shadows, sun flare, "
            "magic hour cinematography, soft warm light"
        ),
        category_id="lighting",
        tags=["golden", "warm", "sunset"],
        is_quick_access=True,
    ),
    PromptTemplate(
        id="light-002",
        title="Film Noir Lighting",
        prompt=(
            "film noir lighting, high contrast, venetian blind shadows, "
            "black and white aesthetic, dramatic shadows"
        ),
        category_id="lighting",
        tags=["noir", "contrast", "shadows"],
    ),
    PromptTemplate(
        id="env-001",
        title="Post-Apocalyptic City",
        prompt=(
            "abandoned cityscape, post-apocalyptic environment, overgrown vegetation, "
            "destroyed buildings, atmospheric fog"
        ),
        category_id="environments",
        tags=["apocalyptic", "city", "abandoned"],
    ),
    PromptTemplate(
        id="env-002",
        title="Fantasy Forest",
        prompt=(
            "enchanted forest, magical atmosphere, bioluminescent plants, mystical fog, "
            "fantasy environment, ethereal lighting"
        ),
        category_id="environments",
        tags=["fantasy", "forest", "magical"],
        is_quick_access=True,
    ),
]
