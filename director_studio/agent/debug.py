"""Debug tracing for LLM calls made by the song agents."""

from __future__ import annotations

import json
import logging
from typing import Any

log = logging.getLogger(__name__)


def _format_value(value: Any, max_length: int | None = 300) -> str:
    """Format a value for display, truncating if needed."""
    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        s = json.dumps(value, indent=2, default=str)
    elif hasattr(value, "model_dump"):
        s = json.dumps(value.model_dump(), indent=2, default=str)
    else:
        s = str(value)

    if max_length is not None and len(s) > max_length:
        return s[:max_length] + f"\n... (truncated {len(s) - max_length} chars)"
    return s


def _banner(title: str) -> None:
    log.debug("=" * 80)
    log.debug(title)
    log.debug("=" * 80)


def trace_model_config(model_name: str, base_url: str | None, response_format: str | None = None) -> None:
    """Log model configuration."""
    _banner("MODEL CONFIGURATION")
    log.debug(f"Model: {model_name}")
    log.debug(f"Base URL: {base_url or 'default'}")
    if response_format:
        log.debug(f"Response format: {response_format}")
    log.debug("=" * 80)


def trace_prompt(system_prompt: str, prompt: str) -> None:
    """Log the system and user prompts of one call."""
    _banner("SYSTEM PROMPT")
    log.debug(_format_value(system_prompt, max_length=None))
    _banner("USER PROMPT")
    log.debug(_format_value(prompt, max_length=2000))
    log.debug("=" * 80)


def trace_final_output(output: Any) -> None:
    """Log the final agent output."""
    _banner("FINAL OUTPUT")
    log.debug(_format_value(output, max_length=None))
    log.debug("=" * 80)


def trace_usage(usage: Any) -> None:
    """Log token usage information."""
    if usage is None:
        return
    _banner("API USAGE")
    log.debug(_format_value(usage))
    log.debug("=" * 80)
