#!/usr/bin/env python3
"""
Terminal helpers that use the same reporters as the dashboard, without HTTP.

Commands:
  - samsara-stats: print JSON system stats and gauge values to stdout
"""
from __future__ import annotations

import json
import sys

from .config import Settings
from .executor import CommandExecutor
from .metrics import MetricReporter
from .platforms import detect
from .usage import gauges


def stats_cmd() -> int:
    try:
        settings = Settings.from_env()
        profile = detect()
        reporter = MetricReporter(profile, CommandExecutor(timeout=settings.command_timeout))
        stats = reporter.collect().to_dict()
        payload = {
            "platform": profile.platform.value,
            "stats": stats,
            "gauges": gauges(stats),
        }
        sys.stdout.write(json.dumps(payload, separators=(",", ":"), ensure_ascii=False) + "\n")
        return 0
    except Exception as e:
        sys.stderr.write(f"error: {e}\n")
        return 1


if __name__ == "__main__":  # manual run: python -m samsara_hub.cli
    raise SystemExit(stats_cmd())
