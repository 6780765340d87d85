"""Fetch the raw vocabulary list from a local JSON file or an http(s) URL."""
from __future__ import annotations

import json
import logging
import time
from pathlib import Path

import httpx

from vocab_quiz.errors import DataFormatError, LoadError
from vocab_quiz.store import ChapterIndex, load

log = logging.getLogger("vocab_quiz.loader")


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def fetch_vocabulary(
    source: str | Path,
    timeout: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> list:
    """Return the decoded record list from *source*.

    Any failure to reach or decode the source raises LoadError; a decoded
    value that is not a JSON array raises DataFormatError.
    """
    source = str(source)
    t0 = time.monotonic()
    try:
        if is_url(source):
            if client is None:
                async with httpx.AsyncClient(timeout=timeout) as owned:
                    resp = await owned.get(source)
            else:
                resp = await client.get(source)
            resp.raise_for_status()
            data = resp.json()
        else:
            data = json.loads(Path(source).read_text(encoding="utf-8-sig"))
    except httpx.HTTPStatusError as e:
        raise LoadError(f"Could not fetch {source}: HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise LoadError(f"Could not fetch {source}: {e}") from e
    except OSError as e:
        raise LoadError(f"Could not read {source}: {e}") from e
    except ValueError as e:
        # json.JSONDecodeError and UnicodeDecodeError both land here
        raise LoadError(f"{source} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise DataFormatError(
            f"{source} must contain a JSON array of records (got {type(data).__name__})"
        )
    log.info("Fetched %d records from %s (%.2fs)", len(data), source, time.monotonic() - t0)
    return data


async def load_vocabulary(
    source: str | Path,
    timeout: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> ChapterIndex:
    """Fetch *source* and build the chapter index in one step."""
    records = await fetch_vocabulary(source, timeout=timeout, client=client)
    return load(records)
