"""Shot list and export configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ExportFormat = Literal["text", "numbered", "json", "csv"]
Separator = Literal["\n", "\n\n", ", "]
SourceType = Literal["story", "music-video"]


class ShotMetadata(BaseModel):
    """Optional production details attached to a shot."""

    model_config = ConfigDict(populate_by_name=True)

    director_style: str | None = Field(default=None, alias="directorStyle")
    timestamp: str | None = None
    source_type: SourceType | None = Field(default=None, alias="sourceType")


class ShotData(BaseModel):
    """A single camera take: descriptive text plus optional placement."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="Stable identifier for the shot")
    description: str = Field(description="Shot description, may contain @variables")
    chapter: str | None = Field(default=None, description="Story chapter")
    section: str | None = Field(default=None, description="Song section, e.g. 'Verse 1'")
    shot_number: int | None = Field(default=None, alias="shotNumber")
    metadata: ShotMetadata | None = None


class ExportConfig(BaseModel):
    """How a shot list is decorated and serialized."""

    model_config = ConfigDict(populate_by_name=True)

    prefix: str = ""
    suffix: str = ""
    use_artist_descriptions: bool = Field(
        default=False,
        alias="useArtistDescriptions",
        description="Resolve @artist to the artist description instead of the name",
    )
    format: ExportFormat = "text"
    separator: Separator = "\n"
    include_metadata: bool = Field(default=False, alias="includeMetadata")


class ExportVariables(BaseModel):
    """Values substituted for @-placeholders in shot descriptions."""

    model_config = ConfigDict(populate_by_name=True)

    artist_name: str | None = Field(default=None, alias="artistName")
    artist_description: str | None = Field(default=None, alias="artistDescription")
    artist_tag: str | None = Field(default=None, alias="artistTag")
    director: str | None = None
    chapter: str | None = None
    section: str | None = None
    location: str | None = None


class ExportResult(BaseModel):
    """Formatted export plus bookkeeping."""

    model_config = ConfigDict(populate_by_name=True)

    formatted_text: str = Field(alias="formattedText")
    total_shots: int = Field(alias="totalShots")
    processing_time: float = Field(alias="processingTime", description="Milliseconds")
    config: ExportConfig
