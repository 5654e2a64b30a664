"""Shot list export: variable substitution, decoration and serialization."""

from __future__ import annotations

import csv
import io
import json
import logging
import re
import time
from datetime import datetime
from pathlib import Path

from director_studio.models.shot import (
    ExportConfig,
    ExportResult,
    ExportVariables,
    ShotData,
)
from director_studio.models.song_dna import utc_now_iso

log = logging.getLogger(__name__)

CSV_HEADER = ["Shot Number", "Description", "Chapter", "Section", "Director Style"]

# Longest alternatives first so "@artist-desc" never matches as "@artist".
_VARIABLE_RE = re.compile(
    r"@(artist-desc|artist-tag|artist|director|chapter|section|location)(?![\w-])"
)
_PUNCTUATION_START = tuple(",.;:!?")


def create_artist_tag(name: str) -> str:
    """Turn an artist name into a lowercase ``[a-z0-9_]`` tag.

    >>> create_artist_tag("A$AP Rocky")
    'asap_rocky'
    """
    tag = name.lower().replace("$", "s")
    tag = re.sub(r"[^a-z0-9_\s]", "", tag)
    tag = re.sub(r"\s+", "_", tag)
    tag = re.sub(r"_+", "_", tag).strip("_")
    return tag or "artist"


def replace_variables(
    text: str,
    variables: ExportVariables,
    prefer_description: bool = False,
) -> str:
    """Substitute @-placeholders; unknown or unset placeholders stay as written."""

    def _resolve(match: re.Match) -> str:
        token = match.group(1)
        if token == "artist":
            if prefer_description and variables.artist_description:
                value = variables.artist_description
            else:
                value = variables.artist_name or variables.artist_description
        elif token == "artist-desc":
            value = variables.artist_description
        elif token == "artist-tag":
            value = variables.artist_tag
        else:
            value = getattr(variables, token)
        return value if value else match.group(0)

    return _VARIABLE_RE.sub(_resolve, text)


def apply_prefix_suffix(text: str, prefix: str = "", suffix: str = "") -> str:
    result = text.strip()
    prefix = (prefix or "").strip()
    suffix = (suffix or "").strip()
    if prefix:
        result = f"{prefix} {result}" if result else prefix
    if suffix:
        if not result:
            result = suffix
        elif suffix.startswith(_PUNCTUATION_START):
            result = f"{result}{suffix}"
        else:
            result = f"{result} {suffix}"
    return result


def _shot_json(shot: ShotData, index: int, description: str, include_metadata: bool) -> dict:
    data = {"id": shot.id, "shotNumber": index + 1, "description": description}
    if shot.chapter is not None:
        data["chapter"] = shot.chapter
    if shot.section is not None:
        data["section"] = shot.section
    if include_metadata and shot.metadata is not None:
        data["metadata"] = shot.metadata.model_dump(by_alias=True, exclude_none=True)
    return data


def _to_csv(shots: list[ShotData], descriptions: list[str]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for index, (shot, description) in enumerate(zip(shots, descriptions)):
        director_style = shot.metadata.director_style if shot.metadata else None
        writer.writerow(
            [
                index + 1,
                description,
                shot.chapter or "",
                shot.section or "",
                director_style or "",
            ]
        )
    return buffer.getvalue().rstrip("\n")


def format_shots(
    shots: list[ShotData],
    config: ExportConfig,
    variables: ExportVariables | None = None,
) -> str:
    """Render a shot list in the configured format."""
    variables = variables or ExportVariables()
    descriptions = []
    for shot in shots:
        shot_vars = variables.model_copy(
            update={
                "chapter": shot.chapter or variables.chapter,
                "section": shot.section or variables.section,
            }
        )
        text = replace_variables(
            shot.description, shot_vars, prefer_description=config.use_artist_descriptions
        )
        descriptions.append(apply_prefix_suffix(text, config.prefix, config.suffix))

    if config.format == "numbered":
        return config.separator.join(
            f"{i + 1}. {description}" for i, description in enumerate(descriptions)
        )
    if config.format == "json":
        payload = {
            "shots": [
                _shot_json(shot, i, description, config.include_metadata)
                for i, (shot, description) in enumerate(zip(shots, descriptions))
            ],
            "totalShots": len(shots),
            "exportConfig": config.model_dump(by_alias=True),
            "exportedAt": utc_now_iso(),
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)
    if config.format == "csv":
        return _to_csv(shots, descriptions)
    return config.separator.join(descriptions)


def process_shots_for_export(
    shots: list[ShotData],
    config: ExportConfig,
    variables: ExportVariables | None = None,
) -> ExportResult:
    """Format a shot list and report how long it took."""
    start = time.perf_counter()
    variables = variables or ExportVariables()
    if variables.artist_name and not variables.artist_tag:
        variables = variables.model_copy(
            update={"artist_tag": create_artist_tag(variables.artist_name)}
        )

    formatted = format_shots(shots, config, variables)
    elapsed_ms = (time.perf_counter() - start) * 1000
    log.info("Exported %d shots as %s in %.1fms", len(shots), config.format, elapsed_ms)

    return ExportResult(
        formatted_text=formatted,
        total_shots=len(shots),
        processing_time=elapsed_ms,
        config=config,
    )


def get_suggested_filename(
    config: ExportConfig,
    project_type: str,
    artist_name: str | None = None,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now()
    if artist_name:
        base_name = f"{project_type}-{create_artist_tag(artist_name)}-shots"
    else:
        base_name = f"{project_type}-shots"
    extension = config.format if config.format in ("json", "csv") else "txt"
    return f"{base_name}-{now:%Y-%m-%d-%H-%M-%S}.{extension}"


def write_export(
    result: ExportResult,
    directory: str | Path,
    filename: str | None = None,
    project_type: str = "story",
    artist_name: str | None = None,
) -> Path:
    """Write formatted export text to ``directory`` and return the file path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    filename = filename or get_suggested_filename(result.config, project_type, artist_name)
    path = directory / filename
    path.write_text(result.formatted_text, encoding="utf-8")
    log.info("Wrote export to %s", path)
    return path
