"""CLI entry point: export shot lists, analyze lyrics and generate songs from Song DNA."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from director_studio.agent.llm import MissingAPIKeyError
from director_studio.agent.song_dna_agent import analyze_song_dna, analyze_song_dna_enhanced
from director_studio.agent.song_writer import SongGenerationError, generate_from_dna
from director_studio.export.processor import process_shots_for_export, write_export
from director_studio.lyrics.analysis import analyze_flow_pattern, lyric_lines, split_sections
from director_studio.lyrics.multisyllable import detect_multi_syllable_rhyme_scheme
from director_studio.lyrics.rhyme import detect_rhyme_scheme
from director_studio.models.shot import ExportConfig, ExportVariables, ShotData
from director_studio.models.song_dna import AnalysisRequest, GenerationOptions
from director_studio.services.artist_store import ArtistBank
from director_studio.services.dna_validator import ensure_valid_dna
from director_studio.services.local_storage import FileLocalStorage

log = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every step to stderr.",
    )
    common.add_argument(
        "--debug",
        action="store_true",
        help="Log full prompts and model replies.",
    )
    common.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (default: outputs/YYYY-MM-DD/HH-MM-SS).",
    )

    llm_options = argparse.ArgumentParser(add_help=False)
    llm_options.add_argument(
        "--model", "-m",
        type=str,
        default=None,
        help="Chat model ID (default: $OPENAI_MODEL or gpt-4o-mini).",
    )
    llm_options.add_argument(
        "--storage",
        type=str,
        default=None,
        help="Key/value storage file holding the artist bank (default: $DSVB_STORAGE_PATH).",
    )
    llm_options.add_argument(
        "--artist-id",
        type=str,
        default=None,
        help="Artist profile ID from the artist bank.",
    )

    parser = argparse.ArgumentParser(
        description="Director Studio: shot export, lyric analysis and Song DNA generation."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", parents=[common], help="Format a shot list file.")
    export.add_argument("shots", help="JSON file with a list of shots or {shots, config, variables}.")
    export.add_argument(
        "--format", "-f",
        choices=["text", "numbered", "json", "csv"],
        default=None,
        help="Export format (default: text, or the file's config).",
    )
    export.add_argument("--prefix", type=str, default=None, help="Text prepended to every shot.")
    export.add_argument("--suffix", type=str, default=None, help="Text appended to every shot.")
    export.add_argument(
        "--separator",
        choices=["newline", "double-newline", "comma"],
        default=None,
        help="Separator between shots for text and numbered formats.",
    )
    export.add_argument("--include-metadata", action="store_true", help="Include shot metadata in JSON.")
    export.add_argument("--artist", type=str, default=None, help="Value for @artist and @artist-tag.")
    export.add_argument("--artist-description", type=str, default=None, help="Value for @artist-desc.")
    export.add_argument("--director", type=str, default=None, help="Value for @director.")
    export.add_argument("--location", type=str, default=None, help="Value for @location.")
    export.add_argument(
        "--project-type",
        choices=["story", "music-video"],
        default="story",
        help="Project type used in the output filename.",
    )

    rhyme = subparsers.add_parser("rhyme", parents=[common], help="Rhyme schemes per lyric section.")
    rhyme.add_argument("lyrics", help="Plain-text lyrics file.")

    analyze = subparsers.add_parser(
        "analyze", parents=[common, llm_options], help="Analyze lyrics into a Song DNA."
    )
    analyze.add_argument("lyrics", help="Plain-text lyrics file.")
    analyze.add_argument("--title", type=str, default=None, help="Song title.")
    analyze.add_argument("--artist", type=str, default=None, help="Performing artist.")
    analyze.add_argument(
        "--enhanced",
        action="store_true",
        help="Use syllable-level rhyme analysis and ask the model only for themes.",
    )

    generate = subparsers.add_parser(
        "generate", parents=[common, llm_options], help="Generate songs from a Song DNA file."
    )
    generate.add_argument("dna", help="Song DNA JSON (a DNA, an analysis result or a DNA export).")
    generate.add_argument("--theme", "-t", type=str, required=True, help="What the new songs are about.")
    generate.add_argument("--count", "-n", type=int, default=2, help="Number of songs (1-5, default: 2).")
    generate.add_argument("--creativity", type=float, default=5, help="Creativity 0-10 (default: 5).")
    generate.add_argument(
        "--variation-mode",
        choices=["similar", "diverse"],
        default="diverse",
        help="How much the songs differ from each other.",
    )
    generate.add_argument("--clean", action="store_true", help="Keep content family-friendly.")

    return parser.parse_args(argv)


def setup_output_dir(custom_dir: str | None = None) -> Path:
    """Create output directory with timestamp."""
    if custom_dir:
        output_dir = Path(custom_dir)
    else:
        now = datetime.now()
        output_dir = Path("outputs") / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")

    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def setup_logging(output_dir: Path, verbose: bool = False, debug: bool = False) -> None:
    """Setup logging to both console and file."""
    log_level = logging.DEBUG if (verbose or debug) else logging.INFO

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(output_dir / "execution.log")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)


SEPARATORS = {"newline": "\n", "double-newline": "\n\n", "comma": ", "}


def run_export(args: argparse.Namespace, output_dir: Path) -> dict:
    data = json.loads(Path(args.shots).read_text(encoding="utf-8"))
    if isinstance(data, list):
        data = {"shots": data}

    config = ExportConfig.model_validate(data.get("config") or {})
    overrides = {
        "format": args.format,
        "prefix": args.prefix,
        "suffix": args.suffix,
        "separator": SEPARATORS.get(args.separator) if args.separator else None,
    }
    config = config.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    if args.include_metadata:
        config = config.model_copy(update={"include_metadata": True})

    variables = ExportVariables.model_validate(data.get("variables") or {})
    variable_overrides = {
        "artist_name": args.artist,
        "artist_description": args.artist_description,
        "director": args.director,
        "location": args.location,
    }
    variables = variables.model_copy(
        update={k: v for k, v in variable_overrides.items() if v is not None}
    )

    shots = [ShotData.model_validate(item) for item in data.get("shots") or []]
    result = process_shots_for_export(shots, config, variables)
    path = write_export(
        result, output_dir, project_type=args.project_type, artist_name=variables.artist_name
    )
    print(result.formatted_text)
    return {"file": str(path), **result.model_dump(by_alias=True, exclude={"formatted_text"})}


def run_rhyme(args: argparse.Namespace) -> dict:
    lyrics = Path(args.lyrics).read_text(encoding="utf-8")
    sections = []
    for i, body in enumerate(split_sections(lyrics)):
        lines = lyric_lines(body)
        scheme = detect_rhyme_scheme(lines)
        multi = detect_multi_syllable_rhyme_scheme(lines)
        log.info(f"Section {i + 1}: {scheme} (multi-syllable: {multi.pattern})")
        sections.append({"section": i + 1, "lines": lines, "pattern": scheme, "multi_syllable": multi.pattern})
    flow = analyze_flow_pattern(lyrics)
    result = {"sections": sections, "flow": flow.model_dump()}
    print(json.dumps(result, indent=2))
    return result


async def run_analyze(args: argparse.Namespace) -> dict:
    request = AnalysisRequest(
        lyrics=Path(args.lyrics).read_text(encoding="utf-8"),
        title=args.title,
        artist=args.artist,
        artist_profile_id=args.artist_id,
    )
    bank = ArtistBank(FileLocalStorage(args.storage))
    analyze = analyze_song_dna_enhanced if args.enhanced else analyze_song_dna
    result = await analyze(request, artist_bank=bank, model_name=args.model, debug=args.debug)
    print(result.model_dump_json(indent=2))
    return result.model_dump()


def _load_dna(path: str):
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    # Accept an analysis result or a library export as well as a bare DNA.
    if "song_dna" in data:
        data = data["song_dna"]
    elif "dna" in data and "version" in data:
        data = data["dna"]
    return ensure_valid_dna(data)


async def run_generate(args: argparse.Namespace) -> dict:
    dna = _load_dna(args.dna)
    options = GenerationOptions(
        theme=args.theme,
        count=args.count,
        creativity=args.creativity,
        variation_mode=args.variation_mode,
        explicit_allowed=not args.clean,
        artist_profile_id=args.artist_id,
    )
    artist = ArtistBank(FileLocalStorage(args.storage)).get(args.artist_id) if args.artist_id else None
    songs = await generate_from_dna(
        dna, options, artist_profile=artist, model_name=args.model, debug=args.debug
    )
    for song in songs:
        print(f"{song.title}\n{'=' * len(song.title)}\n{song.lyrics}\n")
    return {"songs": [song.model_dump() for song in songs]}


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    output_dir = setup_output_dir(args.output_dir)
    setup_logging(output_dir, args.verbose, args.debug)

    start_time = time.time()
    start_datetime = datetime.now().isoformat()

    log.info("=" * 80)
    log.info(f"Starting {args.command}")
    log.info("Execution Parameters:")
    log.info(f"  - Timestamp: {start_datetime}")
    for key, value in sorted(vars(args).items()):
        log.info(f"  - {key}: {value}")
    log.info(f"  - Output directory: {output_dir}")
    log.info("=" * 80)

    try:
        if args.command == "export":
            result = run_export(args, output_dir)
        elif args.command == "rhyme":
            result = run_rhyme(args)
        elif args.command == "analyze":
            result = await run_analyze(args)
        else:
            result = await run_generate(args)
    except (MissingAPIKeyError, SongGenerationError, ValueError, OSError) as e:
        log.error(f"Error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    elapsed_time = time.time() - start_time
    log.info("=" * 80)
    log.info(f"Execution completed successfully in {elapsed_time:.2f}s")
    log.info("=" * 80)

    output_file = output_dir / "result.json"
    output_file.write_text(json.dumps(result, indent=2, default=str))
    log.info(f"Result saved to {output_file}")

    params_file = output_dir / "params.json"
    params = {"timestamp": start_datetime, **vars(args), "runtime_seconds": elapsed_time}
    params_file.write_text(json.dumps(params, indent=2))
    log.info(f"Parameters saved to {params_file}")


if __name__ == "__main__":
    asyncio.run(main())
