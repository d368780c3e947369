"""Terminal battle log built on rich.

Renders session history (one row per turn), HP bars, status lists and the
reward panel, plus the ability catalog table used by the CLI.
"""
from __future__ import annotations
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.box import ROUNDED
from rich.markup import escape

from petverse.battle.models import Ability
from petverse.battle.rewards import BattleRewards
from petverse.battle.session import BattleSession, TurnRecord
from petverse.core.types import rich_type_style, type_abbreviation

console = Console()

_RESULT_STYLES = {
    "win": "green",
    "lose": "red",
    "tie": "bright_black",
    "both damaged": "yellow",
}


def _typed(type_name: str, text: str) -> str:
    style = rich_type_style(type_name)
    if not style:
        return text
    return f"[{style}]{text}[/{style}]"


def hp_bar(current: int, max_hp: int, width: int = 20) -> str:
    """HP bar in rich markup, green/yellow/red by remaining share."""
    if max_hp <= 0 or current <= 0:
        return "[red]FAINTED[/red]"
    percent = min(1.0, current / max_hp)
    filled = int(percent * width)
    if percent > 0.5:
        color = "green"
    elif percent > 0.25:
        color = "yellow"
    else:
        color = "red"
    bar = "█" * filled + "░" * (width - filled)
    return f"[{color}]{bar}[/{color}] {current}/{max_hp}"


def format_percentage(decimal: float, decimals: int = 1) -> str:
    return f"{decimal * 100:.{decimals}f}%"


def format_cooldown(turns: int) -> str:
    return f"{turns} turn{'s' if turns != 1 else ''}"


def format_status_list(names: Iterable[str]) -> str:
    """Comma list of statuses; stacks of one name show as ``burn x2``."""
    counts = Counter(names)
    if not counts:
        return "-"
    return ", ".join(n if c == 1 else f"{n} x{c}" for n, c in counts.items())


def format_rewards(rewards: BattleRewards) -> Panel:
    body = (
        f"[bold]Coins:[/bold] {rewards.coins:,}\n"
        f"[bold]Experience:[/bold] {rewards.experience:,}\n"
        f"[bold]Bonus:[/bold] x{rewards.bonus_multiplier:.2f}"
    )
    return Panel(body, title="[bold]REWARDS[/bold]", box=ROUNDED, padding=(0, 1))


def turn_table(records: Sequence[TurnRecord]) -> Table:
    table = Table(title="Battle Log", box=ROUNDED, show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Player")
    table.add_column("Action")
    table.add_column("Opponent")
    table.add_column("Action")
    table.add_column("Result")
    table.add_column("Dmg", justify="right")
    table.add_column("Player HP")
    table.add_column("Opponent HP")
    for r in records:
        style = _RESULT_STYLES.get(r.result, "")
        action = r.player_action if not r.ability else f"{r.player_action} ({r.ability})"
        table.add_row(
            str(r.number),
            _typed(r.player_type, f"{r.player} [{type_abbreviation(r.player_type)}]"),
            action,
            _typed(r.opponent_type, f"{r.opponent} [{type_abbreviation(r.opponent_type)}]"),
            r.opponent_action,
            f"[{style}]{r.result}[/{style}]" if style else r.result,
            str(r.damage),
            hp_bar(*r.player_hp, width=10),
            hp_bar(*r.opponent_hp, width=10),
        )
    return table


def render_turn(record: TurnRecord, out: Optional[Console] = None, *, show_messages: bool = True):
    out = out or console
    header = Text.from_markup(
        f"[bold]Turn {record.number}[/bold]  {record.player} {record.player_action} / "
        f"{record.opponent} {record.opponent_action} -> {record.result} ({record.damage})"
    )
    out.print(header)
    for name, hp, statuses in ((record.player, record.player_hp, record.player_status),
                               (record.opponent, record.opponent_hp, record.opponent_status)):
        tag = escape(f"[{format_status_list(statuses)}]")
        out.print(f"  {name}: {hp_bar(*hp)}  {tag}", highlight=False)
    if show_messages:
        for line in record.messages:
            out.print(f"    {line}", markup=False, highlight=False)


def render_session(session: BattleSession, out: Optional[Console] = None, *,
                   rewards: Optional[BattleRewards] = None, verbose: bool = False):
    out = out or console
    if verbose:
        for record in session.history:
            render_turn(record, out)
    else:
        out.print(turn_table(session.history))
    outcome = session.outcome()
    color = {"PLAYER_WIN": "green", "PLAYER_LOSS": "red"}.get(outcome, "yellow")
    out.print(Panel(f"[{color} bold]{outcome}[/{color} bold] after {session.turn_counter} turns",
                    box=ROUNDED, title=session.battle_id))
    if rewards is not None:
        out.print(format_rewards(rewards))


def ability_table(abilities: Iterable[Ability], title: str = "Abilities") -> Table:
    table = Table(title=title, box=ROUNDED)
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Element")
    table.add_column("Type")
    table.add_column("Power", justify="right")
    table.add_column("Cooldown")
    table.add_column("Effect")
    table.add_column("Chance", justify="right")
    for a in abilities:
        chance = format_percentage(a.effect_chance) if a.effect_chance is not None else "-"
        table.add_row(
            a.id,
            a.name,
            _typed(a.element, a.element.title()),
            a.type.value,
            str(a.power) if a.power > 0 else "-",
            format_cooldown(a.cooldown),
            a.effect.value if a.effect else "-",
            chance,
        )
    return table


__all__: List[str] = [
    "console", "hp_bar", "format_percentage", "format_cooldown", "format_status_list",
    "format_rewards", "turn_table", "render_turn", "render_session", "ability_table",
]
