#!/usr/bin/env python3
"""
Boot the dashboard in-process on a free candidate port and check that every
JSON endpoint answers with JSON. Read-only: nothing is installed or stopped.
"""
from __future__ import annotations

import json
import logging
import sys
import threading
import urllib.error
import urllib.request
from typing import Any, List, Optional, Tuple

from .__main__ import bind_server
from .config import Settings
from .server import create_app

ENDPOINTS = [
    "/health",
    "/api/system/info",
    "/api/system/stats",
    "/api/packages/list",
    "/api/services/list",
]


def _get_json(url: str, timeout: float = 60.0) -> Tuple[int, Any]:
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310 (local-only)
            return resp.status, json.loads(resp.read().decode())
    except urllib.error.HTTPError as e:
        return e.code, json.loads(e.read().decode() or "null")


def main(argv: Optional[List[str]] = None) -> int:
    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    settings = Settings.from_env()
    app = create_app(settings=settings)
    try:
        server = bind_server(app, settings)
    except Exception as e:
        print(f"FAIL: could not bind: {e}", file=sys.stderr)
        return 2

    thread = threading.Thread(target=server.serve_forever, name="samsara-selftest", daemon=True)
    thread.start()
    base_url = f"http://{settings.host}:{server.port}"

    failures: List[str] = []
    try:
        for path in ENDPOINTS:
            try:
                status, _body = _get_json(base_url + path)
            except Exception as e:
                print(f"FAIL: {path}: {e}", file=sys.stderr)
                failures.append(path)
                continue
            if status != 200:
                failures.append(path)
    finally:
        server.shutdown()
        server.server_close()

    if failures:
        print("FAIL: endpoints with errors:", ", ".join(failures))
        return 1

    print(f"PASS: {len(ENDPOINTS)} endpoints returned JSON on {base_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
