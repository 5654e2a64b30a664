"""REST API routes for shot export, lyric analysis and Song DNA generation."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from director_studio.agent.llm import MissingAPIKeyError
from director_studio.agent.song_dna_agent import analyze_song_dna, analyze_song_dna_enhanced
from director_studio.agent.song_writer import SongGenerationError, generate_from_dna
from director_studio.export.processor import process_shots_for_export
from director_studio.export.song_export import format_dna_insights, format_song_for_music_video
from director_studio.lyrics.analysis import analyze_flow_pattern, lyric_lines, quick_analyze, split_sections
from director_studio.lyrics.multisyllable import detect_multi_syllable_rhyme_scheme
from director_studio.lyrics.phonetics import detect_rhyme_pattern_enhanced
from director_studio.lyrics.rhyme import detect_rhyme_scheme
from director_studio.models.artist import ArtistProfile
from director_studio.models.shot import ExportConfig, ExportResult, ExportVariables, ShotData
from director_studio.models.song_dna import (
    AnalysisRequest,
    AnalysisResult,
    ExportedSongData,
    GeneratedSong,
    GenerationOptions,
    SongDNA,
    StoredSongDNA,
)
from director_studio.services.artist_store import ArtistBank
from director_studio.services.dna_library import DNANotFoundError, SongDNALibrary
from director_studio.services.local_storage import FileLocalStorage, LocalStorage
from director_studio.services.prompt_library import PromptLibrary, get_prompt_loader

log = logging.getLogger(__name__)


class ExportRequest(BaseModel):
    shots: list[ShotData]
    config: ExportConfig
    variables: Optional[ExportVariables] = None


class LyricsRequest(BaseModel):
    lyrics: str


class SectionScheme(BaseModel):
    section: int
    lines: int
    pattern: str
    enhanced_pattern: str
    multi_syllable_pattern: str


class RhymeSchemeResponse(BaseModel):
    sections: list[SectionScheme]
    flow_type: str
    average_syllables: float


class GenerateRequest(BaseModel):
    dna: SongDNA
    options: GenerationOptions


class SongExportRequest(BaseModel):
    song: GeneratedSong
    dna: Optional[SongDNA] = None


class SaveDNARequest(BaseModel):
    dna: SongDNA
    title: Optional[str] = None
    artist: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None


class ActiveArtistRequest(BaseModel):
    artist_id: Optional[str] = None


def create_app(storage: LocalStorage | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    All stores share one key/value storage; it defaults to the JSON file
    named by ``DSVB_STORAGE_PATH``.
    """
    storage = storage if storage is not None else FileLocalStorage()
    artist_bank = ArtistBank(storage)
    dna_library = SongDNALibrary(storage)
    prompt_library = PromptLibrary(storage)

    app = FastAPI(
        title="Director Studio API",
        description="Shot export, lyric analysis and Song DNA generation",
        version="0.1.0",
    )
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/export")
    async def export_shots(request: ExportRequest) -> ExportResult:
        """Format a shot list for copy or download."""
        return process_shots_for_export(request.shots, request.config, request.variables)

    @app.post("/api/lyrics/rhyme-scheme")
    async def rhyme_scheme(request: LyricsRequest) -> RhymeSchemeResponse:
        sections = []
        for i, body in enumerate(split_sections(request.lyrics)):
            lines = lyric_lines(body)
            sections.append(
                SectionScheme(
                    section=i + 1,
                    lines=len(lines),
                    pattern=detect_rhyme_scheme(lines),
                    enhanced_pattern=detect_rhyme_pattern_enhanced(lines),
                    multi_syllable_pattern=detect_multi_syllable_rhyme_scheme(lines).pattern,
                )
            )
        flow = analyze_flow_pattern(request.lyrics)
        return RhymeSchemeResponse(
            sections=sections,
            flow_type=flow.flow_type,
            average_syllables=flow.average_syllables,
        )

    @app.post("/api/song-dna/quick")
    async def song_dna_quick(request: LyricsRequest) -> SongDNA:
        """Structure and syllable summary without any LLM call."""
        return quick_analyze(request.lyrics)

    @app.post("/api/song-dna/analyze")
    async def song_dna_analyze(request: AnalysisRequest, enhanced: bool = False) -> AnalysisResult:
        analyze = analyze_song_dna_enhanced if enhanced else analyze_song_dna
        try:
            return await analyze(request, artist_bank=artist_bank)
        except MissingAPIKeyError as e:
            raise HTTPException(status_code=503, detail=str(e))

    @app.post("/api/song-dna/generate")
    async def song_dna_generate(request: GenerateRequest) -> list[GeneratedSong]:
        artist = None
        if request.options.artist_profile_id:
            artist = artist_bank.get(request.options.artist_profile_id)
        try:
            return await generate_from_dna(request.dna, request.options, artist_profile=artist)
        except MissingAPIKeyError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except SongGenerationError as e:
            raise HTTPException(status_code=502, detail=str(e))

    @app.post("/api/song-dna/insights")
    async def song_dna_insights(dna: SongDNA) -> dict:
        return {"insights": format_dna_insights(dna)}

    @app.post("/api/songs/music-video")
    async def song_to_music_video(request: SongExportRequest) -> ExportedSongData:
        """Package a generated song for the music-video shot generator."""
        return format_song_for_music_video(request.song, request.dna)

    @app.get("/api/artists")
    async def list_artists() -> list[ArtistProfile]:
        return artist_bank.all()

    @app.post("/api/artists")
    async def save_artist(artist: ArtistProfile) -> ArtistProfile:
        return artist_bank.save(artist)

    @app.get("/api/artists/export")
    async def export_artists() -> JSONResponse:
        return JSONResponse(json.loads(artist_bank.export_json()))

    @app.post("/api/artists/import")
    async def import_artists(payload: Any = Body(...)) -> list[ArtistProfile]:
        try:
            return artist_bank.import_json(json.dumps(payload))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.get("/api/artists/active")
    async def get_active_artist() -> Optional[ArtistProfile]:
        return artist_bank.get_active()

    @app.put("/api/artists/active")
    async def set_active_artist(request: ActiveArtistRequest) -> Optional[ArtistProfile]:
        if request.artist_id is None:
            artist_bank.set_active(None)
            return None
        artist = artist_bank.get(request.artist_id)
        if artist is None:
            raise HTTPException(status_code=404, detail="Artist not found")
        artist_bank.set_active(artist)
        return artist

    @app.get("/api/artists/{artist_id}")
    async def get_artist(artist_id: str) -> ArtistProfile:
        artist = artist_bank.get(artist_id)
        if artist is None:
            raise HTTPException(status_code=404, detail="Artist not found")
        return artist

    @app.delete("/api/artists/{artist_id}")
    async def delete_artist(artist_id: str) -> dict:
        if not artist_bank.delete(artist_id):
            raise HTTPException(status_code=404, detail="Artist not found")
        return {"deleted": artist_id}

    @app.get("/api/dna")
    async def list_dna(artist: Optional[str] = None, tag: Optional[str] = None) -> list[StoredSongDNA]:
        """Saved DNA records, newest first, optionally filtered by artist or tag."""
        if artist:
            return dna_library.search_by_artist(artist)
        if tag:
            return dna_library.search_by_tag(tag)
        return dna_library.get_all()

    @app.post("/api/dna")
    async def save_dna(request: SaveDNARequest) -> dict:
        dna_id = dna_library.save(
            request.dna,
            title=request.title,
            artist=request.artist,
            tags=request.tags,
            notes=request.notes,
        )
        return {"id": dna_id}

    @app.post("/api/dna/import")
    async def import_dna(payload: Any = Body(...)) -> dict:
        try:
            dna_id = dna_library.import_dna(json.dumps(payload))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"id": dna_id}

    @app.get("/api/dna/{dna_id}")
    async def get_dna(dna_id: str) -> StoredSongDNA:
        stored = dna_library.get(dna_id)
        if stored is None:
            raise HTTPException(status_code=404, detail="DNA not found")
        return stored

    @app.delete("/api/dna/{dna_id}")
    async def delete_dna(dna_id: str) -> dict:
        if not dna_library.delete(dna_id):
            raise HTTPException(status_code=404, detail="DNA not found")
        return {"deleted": dna_id}

    @app.get("/api/dna/{dna_id}/export")
    async def export_dna(dna_id: str) -> JSONResponse:
        try:
            return JSONResponse(json.loads(dna_library.export_dna(dna_id)))
        except DNANotFoundError:
            raise HTTPException(status_code=404, detail="DNA not found")

    @app.get("/api/prompts")
    async def list_prompts() -> dict:
        """Prompt library, seeded with the presets on first use."""
        get_prompt_loader().initialize(prompt_library)
        return {
            "prompts": [p.model_dump(by_alias=True) for p in prompt_library.prompts()],
            "quickPrompts": [p.model_dump(by_alias=True) for p in prompt_library.quick_prompts()],
        }

    @app.get("/api/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app
