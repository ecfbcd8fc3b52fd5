#!/usr/bin/env python3
"""Resolve scraped Pokemon names against the canonical dataset."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.fusiondex_core.config import build_paths_from_env
from packages.fusiondex_core.names.dataset import DatasetError, PokemonDataset
from packages.fusiondex_core.names.resolver import (
    is_potential_pokemon_name,
    resolve,
    resolve_with_special_cases,
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Resolve Pokemon names to canonical IDs")
    parser.add_argument("names", nargs="*", help="Names to resolve")
    parser.add_argument("--pokemon-data", type=Path, default=build_paths_from_env().pokemon_data)
    parser.add_argument("--from-file", type=Path, default=None, help="Read one name per line from a file")
    parser.add_argument(
        "--special-cases",
        action="store_true",
        help="Apply typo corrections and sentinel entries (Egg, Fossil) on a miss",
    )
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON output")
    args = parser.parse_args()

    names = list(args.names)
    if args.from_file is not None:
        names.extend(
            line.strip()
            for line in args.from_file.read_text(encoding="utf-8").splitlines()
            if line.strip()
        )

    try:
        dataset = PokemonDataset(args.pokemon_data)
        index = dataset.name_index()
    except DatasetError as exc:
        print(f"ERR: {exc}")
        return 1

    resolver = resolve_with_special_cases if args.special_cases else resolve
    results = []
    for name in names:
        pokemon_id = resolver(name, index)
        results.append(
            {
                "query": name,
                "id": pokemon_id,
                "name": index.canonical_name(pokemon_id),
                "potential": is_potential_pokemon_name(name),
            }
        )

    unresolved = [r for r in results if r["id"] is None]
    payload = {
        "total": len(results),
        "resolved": len(results) - len(unresolved),
        "unresolved": len(unresolved),
        "results": results,
    }

    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for result in results:
            if result["id"] is None:
                print(f"WARN: unresolved: {result['query']}")
            else:
                print(f"OK: {result['query']} -> {result['id']} ({result['name']})")
        print(f"Resolved {payload['resolved']}/{payload['total']} name(s), {payload['unresolved']} unresolved")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
