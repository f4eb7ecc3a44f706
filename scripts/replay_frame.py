"""
Reconstruct replay frames from an ingestion bundle and print them as JSON.

Usage:
    python scripts/replay_frame.py frame bundle.json --at 2025-01-01T00:30:00Z
    python scripts/replay_frame.py range bundle.json \
        --start 2025-01-01T00:00:00Z --end 2025-01-01T01:00:00Z --interval-seconds 600
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import timedelta
from pathlib import Path

from forensics.replay.engine import ReplayEngine
from forensics.replay.errors import ReplayError
from forensics.replay.source import ReplayDataSource
from forensics.time.temporal import parse_timestamp


def _load_engine(bundle_path: str) -> ReplayEngine:
    payload = json.loads(Path(bundle_path).read_text(encoding="utf-8"))
    engine = ReplayEngine()
    engine.load_data(ReplayDataSource.from_payload(payload))
    return engine


def run_frame(bundle_path: str, at: str) -> dict:
    engine = _load_engine(bundle_path)
    frame = engine.get_frame_at(parse_timestamp(at))
    return frame.to_payload()


def run_range(bundle_path: str, start: str, end: str, interval_seconds: float) -> list[dict]:
    engine = _load_engine(bundle_path)
    frames = engine.get_frames_in_range(
        parse_timestamp(start),
        parse_timestamp(end),
        timedelta(seconds=interval_seconds),
    )
    return [frame.to_payload() for frame in frames]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Forensic replay frame dump.")
    commands = parser.add_subparsers(dest="command", required=True)

    frame = commands.add_parser("frame", help="Reconstruct a single frame.")
    frame.add_argument("bundle", help="Path to the JSON ingestion bundle.")
    frame.add_argument("--at", required=True, help="ISO-8601 UTC timestamp.")

    frames = commands.add_parser("range", help="Reconstruct frames at fixed steps.")
    frames.add_argument("bundle", help="Path to the JSON ingestion bundle.")
    frames.add_argument("--start", required=True, help="ISO-8601 UTC timestamp.")
    frames.add_argument("--end", required=True, help="ISO-8601 UTC timestamp.")
    frames.add_argument(
        "--interval-seconds",
        type=float,
        default=60.0,
        help="Step between frames.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "frame":
            result = run_frame(args.bundle, args.at)
        else:
            result = run_range(args.bundle, args.start, args.end, args.interval_seconds)
    except (ReplayError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
