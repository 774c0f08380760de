#!/usr/bin/env python3
"""CLI for scoring saved pedestrian route JSON offline."""

import argparse
import json
import sys
from pathlib import Path

from scoring_engine import score, score_routes, turn_label, W_PATH, W_CROSS, W_TURNS


def _load_json(path: str):
    if path == "-":
        raw = sys.stdin.read()
    else:
        p = Path(path)
        if not p.exists():
            print(f"Error: file not found: {p}", file=sys.stderr)
            sys.exit(1)
        raw = p.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON in {path}: {e}", file=sys.stderr)
        sys.exit(1)


def _extract_routes(data) -> list:
    """Accept a bare route, {route: ...} or a routing response {result: [...]}."""
    if isinstance(data, dict):
        if isinstance(data.get("result"), list) and data["result"]:
            return data["result"]
        if isinstance(data.get("route"), dict):
            return [data["route"]]
        if "maneuvers" in data:
            return [data]
    print("Error: no route found (expected maneuvers, route or result[])", file=sys.stderr)
    sys.exit(1)


def _print_result(result: dict) -> None:
    b = result["breakdown"]
    print(f"=== Score: {result['score']} / 10 ({result['rating']}) ===")
    print(f"Distance: {b['total_distance_m']} m   Duration: {b['total_duration_min']} min")

    print(f"\n1. Path quality × {W_PATH}: {result['path_quality']}")
    for style, z in b["zones"].items():
        print(f"  {z['label']:<22} {z['meters']:>6} m ({z['percent']:>3}%) × {z['weight']} = {z['contribution']}")
    print(f"  Σ = {b['weighted_sum']} / {b['total_meters']} m")

    print(f"\n2. Crossing safety × {W_CROSS}: {result['crossing_safety']}")
    if not b["crossing_detail"]:
        print("  No road crossings")
    for c in b["crossing_detail"]:
        print(f"  {c['label']:<22} {c['count']} × {c['safety']}")

    print(f"\n3. Turn simplicity × {W_TURNS}: {result['turn_simplicity']}")
    print(f"  {b['turn_count']} turns, {b['sharp_turns']} sharp, average angle {b['avg_turn_angle']}°")
    for direction, cnt in b["turns"].items():
        print(f"  {turn_label(direction)}: {cnt}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Score pedestrian route comfort from route JSON")
    parser.add_argument("file", help="Route JSON file, or - for stdin")
    parser.add_argument("--all", action="store_true", help="Rank every route in result[]")
    parser.add_argument("--json", action="store_true", help="Output JSON")
    args = parser.parse_args(argv)

    routes = _extract_routes(_load_json(args.file))

    try:
        if args.all:
            output = score_routes(routes)
        else:
            output = score(routes[0]).to_dict()
    except TypeError as e:
        print(f"Error: malformed route: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(output, indent=2, ensure_ascii=False))
    elif args.all:
        for r in output:
            marker = "*" if r["recommended"] else " "
            print(f"{marker} #{r['index']}  {r['score']:>4} / 10  "
                  f"{r['breakdown']['total_distance_m']} m  [{', '.join(r['tags'])}]")
    else:
        _print_result(output)


if __name__ == "__main__":
    main()
