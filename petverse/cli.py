from __future__ import annotations
import argparse
from typing import List, Optional

from rich.table import Table
from rich.box import ROUNDED

from petverse.system.settings import Settings
from petverse.core.logging import logger
from petverse.core.errors import PetverseError
from petverse.data import catalog
from petverse.battle.service import BattleService, demo_ids
from petverse.battle.rewards import BattleRewards
from petverse.ui.battle_log import console, ability_table, render_session


def _configure_logging(settings: Settings):
    log_level = settings.data.log_level
    # Without debug, INFO events would drown the battle log; keep WARN and up.
    if not settings.data.debug and log_level in {"INFO","DEBUG"}:
        logger.set_level("WARN")
    else:
        settings.apply_log_level()


def cmd_simulate(args: argparse.Namespace, settings: Settings) -> int:
    if args.list:
        for bid in demo_ids():
            console.print(bid)
        return 0
    service = BattleService(settings)
    try:
        result = service.start(args.demo, seed=args.seed, max_turns=args.max_turns)
    except KeyError:
        console.print(f"[red]Unknown demo '{args.demo}'.[/red] Available: {', '.join(demo_ids())}")
        return 2
    if result["outcome"] == "INVALID_TEAM":
        console.print(f"[red]Team rejected:[/red] {result['error']}")
        return 1
    rewards = None
    if result["rewards"]:
        r = result["rewards"]
        rewards = BattleRewards(r["coins"], r["experience"], r["bonusMultiplier"])
    if service.last_session is not None:
        render_session(service.last_session, console, rewards=rewards, verbose=args.verbose)
    return 0


def cmd_abilities(args: argparse.Namespace, settings: Settings) -> int:
    if args.element:
        abilities = catalog.abilities_by_element(args.element)
        if not abilities:
            console.print(f"[red]No abilities for element '{args.element}'.[/red]")
            return 1
        title = f"{args.element.upper()} abilities"
    else:
        abilities = sorted(catalog.all_abilities().values(), key=lambda a: (a.element, a.name))
        title = "Abilities"
    console.print(ability_table(abilities, title=title))
    return 0


def cmd_techniques(args: argparse.Namespace, settings: Settings) -> int:
    table = Table(title="Techniques", box=ROUNDED)
    table.add_column("Technique")
    table.add_column("Effect")
    table.add_column("Roll %", justify="right")
    table.add_column("Solo")
    for tech in catalog.all_techniques().values():
        rows = tech.levels or [tech]
        for entry in rows:
            label = f"{tech.name} {entry.level}" if tech.levels else tech.name
            table.add_row(label, entry.effect, f"{entry.chance:g}", "yes" if tech.one_placement else "")
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="petverse", description="Pet battle engine simulator")
    sub = parser.add_subparsers(dest="command")

    sim = sub.add_parser("simulate", help="Run a demo battle and print the log")
    sim.add_argument("--demo", default="tutorial_duel", help="Demo battle id")
    sim.add_argument("--seed", type=int, default=None, help="RNG seed (overrides settings)")
    sim.add_argument("--max-turns", type=int, default=None, help="Turn cap (overrides settings)")
    sim.add_argument("--verbose", action="store_true", help="Print every turn with narration")
    sim.add_argument("--list", action="store_true", help="List demo battle ids")
    sim.set_defaults(func=cmd_simulate)

    ab = sub.add_parser("abilities", help="List catalog abilities")
    ab.add_argument("--element", default=None, help="Only abilities of this element")
    ab.set_defaults(func=cmd_abilities)

    tq = sub.add_parser("techniques", help="List catalog techniques")
    tq.set_defaults(func=cmd_techniques)
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    settings = Settings.load()
    _configure_logging(settings)
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    try:
        return args.func(args, settings)
    except PetverseError as e:
        logger.error("CommandFailed", command=args.command, error=str(e))
        return 1
