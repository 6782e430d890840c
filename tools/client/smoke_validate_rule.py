"""Client-style smoke test for a running rule validation API.

- Uses stdlib-only HTTP client in tools/ci/rule_api_http.py
- Exercises: POST /validate-rule with a nested field that must pass

Env vars:
- RULE_API_BASE_URL (default: http://localhost:3000)

Exit codes:
- 0: request succeeded (status=success)
- 1: error
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

repo_root = Path(__file__).resolve().parents[2]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from tools.ci.rule_api_http import post_json


SMOKE_PAYLOAD = {
    "rule": {"field": "missions.count", "condition": "gte", "condition_value": 30},
    "data": {
        "name": "James Holden",
        "crew": "Rocinante",
        "missions": {"count": 45, "successful": 44, "failed": 1},
    },
}


def main() -> int:
    resp = post_json("/validate-rule", SMOKE_PAYLOAD)

    status = str(resp.get("status") or "")
    data = resp.get("data") or {}

    print(json.dumps({"status": status, "message": resp.get("message")}, indent=2))

    if status != "success":
        print("ERROR: status != success", file=sys.stderr)
        return 1
    if data.get("field_value") != 45:
        print(f"ERROR: unexpected field_value: {data.get('field_value')!r}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
