"""Artist profile records used to parameterize prompts."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class ArtistIdentity(_Section):
    gender: str | None = None
    race_ethnicity: str | None = None
    age_range: str | None = None
    accent: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    hometown_city: str | None = None
    hometown_state: str | None = None


class VocalDescription(_Section):
    tone_texture: str | None = None
    delivery_style: str | None = None
    quirks: list[str] = Field(default_factory=list)


class SignatureEssence(_Section):
    sonic_hallmark: str | None = None


class ProductionPreferences(_Section):
    tempo_energy: str | None = None
    drums_bass_chords: str | None = None
    emotional_arc_rules: str | None = None
    emotional_arc: str | None = None


class WritingPersona(_Section):
    narrative_pov: str | None = None
    linguistic_base: str | None = None
    rhyme_form: str | None = None
    themes: list[str] = Field(default_factory=list)
    signature_devices: list[str] = Field(default_factory=list)


class Personality(_Section):
    mbti: str | None = None


class VisualLook(_Section):
    skin_tone: str | None = None
    hair_style: str | None = None
    fashion_style: str | None = None
    jewelry: str | None = None


class MaterialPrefs(_Section):
    cars: list[str] = Field(default_factory=list)
    diamonds: list[str] = Field(default_factory=list)
    weapons: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class AdlibProfile(_Section):
    bank: list[str] = Field(default_factory=list)
    placement_rules: str | None = None


class CareerDirection(_Section):
    target_markets: list[str] = Field(default_factory=list)
    north_star: str | None = None


class ChatVoice(_Section):
    tone: str | None = None
    never_say: list[str] = Field(default_factory=list)


class ProfileMeta(_Section):
    version: str | None = "1.0"
    created_at: str | None = None
    updated_at: str | None = None


class ArtistProfile(BaseModel):
    """Identity, voice, look and writing persona of a musical artist."""

    model_config = ConfigDict(extra="allow")

    artist_id: str = Field(default_factory=lambda: f"art_{uuid4().hex[:8]}")
    artist_name: str = ""
    real_name: str | None = None
    image_data_url: str | None = None
    artist_identity: ArtistIdentity = Field(default_factory=ArtistIdentity)
    genres: list[str] = Field(default_factory=list)
    sub_genres: list[str] = Field(default_factory=list)
    micro_genres: list[str] = Field(default_factory=list)
    vocal_description: VocalDescription = Field(default_factory=VocalDescription)
    signature_essence: SignatureEssence = Field(default_factory=SignatureEssence)
    production_preferences: ProductionPreferences = Field(default_factory=ProductionPreferences)
    writing_persona: WritingPersona = Field(default_factory=WritingPersona)
    personality: Personality = Field(default_factory=Personality)
    visual_look: VisualLook = Field(default_factory=VisualLook)
    material_prefs: MaterialPrefs = Field(default_factory=MaterialPrefs)
    adlib_profile: AdlibProfile = Field(default_factory=AdlibProfile)
    career_direction: CareerDirection = Field(default_factory=CareerDirection)
    chat_voice: ChatVoice = Field(default_factory=ChatVoice)
    meta: ProfileMeta = Field(default_factory=ProfileMeta)


def blank_artist() -> ArtistProfile:
    return ArtistProfile()


def to_csv_array(value: str | list[str] | None) -> list[str]:
    """Split a comma separated string into trimmed, non-empty items."""
    if isinstance(value, list):
        return value
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, list) and not value)


def _merge(base: Any, incoming: Any) -> Any:
    if isinstance(base, list):
        if base:
            return base
        return incoming if isinstance(incoming, list) else base
    if isinstance(base, dict) and isinstance(incoming, dict):
        merged = dict(base)
        for key, value in incoming.items():
            current = base.get(key)
            if _is_empty(current):
                merged[key] = _merge({}, value) if isinstance(value, dict) else value
            elif isinstance(current, dict) and isinstance(value, dict):
                merged[key] = _merge(current, value)
        return merged
    if _is_empty(base):
        return incoming if incoming is not None else base
    return base


def merge_artist(base: ArtistProfile, incoming: ArtistProfile | dict) -> ArtistProfile:
    """Deep merge that keeps values already present in ``base``.

    Only fields that are missing or empty in ``base`` are filled from ``incoming``.
    """
    if isinstance(incoming, ArtistProfile):
        incoming = incoming.model_dump(exclude_none=True)
    merged = _merge(base.model_dump(), incoming)
    return ArtistProfile.model_validate(merged)
