"""Minimal HTTP client helpers for rule API smoke checks.

- Uses stdlib only (urllib) to avoid extra deps in CI.
- The API answers failed comparisons and bad requests with 4xx plus the
  usual {message, status, data} envelope; those bodies are returned, not raised.

Environment variables:
- RULE_API_BASE_URL (default: http://localhost:3000)
"""

from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from typing import Any


def env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def base_url() -> str:
    return env("RULE_API_BASE_URL") or "http://localhost:3000"


def post_json(path: str, payload: Any, *, timeout_s: int = 30) -> dict[str, Any]:
    url = base_url().rstrip("/") + path
    body = json.dumps(payload).encode("utf-8")

    req = urllib.request.Request(
        url=url,
        data=body,
        method="POST",
        headers={"Content-Type": "application/json"},
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            raw = resp.read().decode("utf-8")
            return json.loads(raw) if raw else {}
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8") if getattr(e, "fp", None) else ""
        if 400 <= e.code < 500:
            try:
                return json.loads(raw) if raw else {}
            except json.JSONDecodeError:
                pass
        raise RuntimeError(f"HTTP {e.code} calling {url}: {raw}") from e
    except urllib.error.URLError as e:
        raise RuntimeError(f"Network error calling {url}: {e}") from e
