"""Thin wrapper around the OpenAI chat completions client."""

from __future__ import annotations

import json
import logging
import os
import time

from openai import OpenAI

from director_studio.agent.debug import (
    trace_final_output,
    trace_model_config,
    trace_prompt,
    trace_usage,
)

log = logging.getLogger(__name__)

# OPENAI_BASE_URL may point at any OpenAI-compatible endpoint, e.g. OpenRouter.
DEFAULT_MODEL_NAME = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_BASE_URL = os.environ.get("OPENAI_BASE_URL")


class MissingAPIKeyError(RuntimeError):
    """Raised before any LLM work when OPENAI_API_KEY is not set."""


def require_api_key() -> None:
    if not os.environ.get("OPENAI_API_KEY"):
        raise MissingAPIKeyError("Missing OPENAI_API_KEY environment variable")


def _make_client() -> OpenAI:
    """Create an OpenAI client, optionally pointed at a compatible base URL."""
    return OpenAI(
        api_key=os.environ.get("OPENAI_API_KEY"),
        base_url=OPENAI_BASE_URL or None,
    )


def complete(
    system_prompt: str,
    prompt: str,
    model_name: str | None = None,
    json_mode: bool = False,
    temperature: float = 0.7,
    debug: bool = False,
) -> str:
    """Run one chat completion and return the reply text."""
    model = model_name or DEFAULT_MODEL_NAME
    if debug:
        trace_model_config(model, OPENAI_BASE_URL, "json_object" if json_mode else None)
        trace_prompt(system_prompt, prompt)

    params = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ],
        "temperature": temperature,
    }
    if json_mode:
        params["response_format"] = {"type": "json_object"}

    start = time.time()
    client = _make_client()
    response = client.chat.completions.create(**params)
    text = response.choices[0].message.content or ""
    log.info("Completion from %s in %.2fs (%d chars)", model, time.time() - start, len(text))

    if debug:
        trace_final_output(text)
        trace_usage(getattr(response, "usage", None))
    return text


def extract_json(text: str) -> dict:
    """Parse the outermost ``{...}`` block of a model reply."""
    json_start = text.find("{")
    json_end = text.rfind("}") + 1
    if json_start < 0 or json_end <= json_start:
        raise ValueError("No JSON found in response")
    data = json.loads(text[json_start:json_end])
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object in response")
    return data
