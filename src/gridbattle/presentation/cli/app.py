"""Command-line runner for stage battles."""
from __future__ import annotations

import argparse
import json
import logging
import secrets
import sys
from typing import List, Optional, Sequence

from gridbattle.core.rng import RNG
from gridbattle.data.errors import DataError
from gridbattle.data.repositories import AbilitiesRepository, StagesRepository, UnitsRepository
from gridbattle.data.settings import load_battle_config
from gridbattle.services import BattleService, BattleSetupError, FactoryError

from .render import render_board, render_heading_lines, render_log, render_summary

_MAX_RANDOM_SEED = 2**31 - 1


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gridbattle",
        description="Simulate a stage battle and print its event log.",
    )
    parser.add_argument("--stage", required=True, help="Stage id from stages.json.")
    parser.add_argument(
        "--heroes",
        default=None,
        help="Comma-separated hero template ids (default: every hero template).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: random).")
    parser.add_argument("--config", default=None, help="Path to a JSON settings file.")
    parser.add_argument("--definitions", default=None, help="Directory holding the definition JSON files.")
    parser.add_argument("--json", action="store_true", help="Print the event log as JSON records.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def build_battle_service(definitions: str | None = None, config_path: str | None = None) -> BattleService:
    """Construct the BattleService with concrete repositories."""
    abilities_repo = AbilitiesRepository(base_path=definitions)
    units_repo = UnitsRepository(base_path=definitions, abilities_repo=abilities_repo)
    stages_repo = StagesRepository(base_path=definitions, units_repo=units_repo)
    return BattleService(
        units_repo=units_repo,
        abilities_repo=abilities_repo,
        stages_repo=stages_repo,
        config=load_battle_config(config_path),
    )


def _hero_ids(raw: str | None, service: BattleService) -> List[str]:
    if raw:
        return [part.strip() for part in raw.split(",") if part.strip()]
    return service.hero_template_ids()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    seed = args.seed if args.seed is not None else secrets.randbelow(_MAX_RANDOM_SEED)
    rng = RNG(seed)

    try:
        service = build_battle_service(args.definitions, args.config)
        heroes = service.create_heroes(_hero_ids(args.heroes, service), rng)
        state = service.simulate_stage(args.stage, heroes, rng)
    except (DataError, FactoryError, BattleSetupError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps({"seed": seed, "winner": state.winner, "events": state.events.to_records()}, indent=2))
        return 0

    for line in render_heading_lines(f"Stage {args.stage} (seed {seed})"):
        print(line)
    for line in render_log(state):
        print(line)
    for line in render_heading_lines("Final board"):
        print(line)
    for line in render_board(state, service.config):
        print(line)
    for line in render_summary(state):
        print(line)
    return 0
