from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..challenge.generator import ChallengeQuestion
from ..features.analysis.schemas import SpotAnalysisPayload
from ..pushfold.drill import DrillResult, DrillRound, DrillTracker
from ..pushfold.resolver import PushFoldResult

_SUIT_STYLE = {"h": "red", "d": "blue", "c": "green", "s": "white"}
_DRILL_KEYS = {"p": "push", "push": "push", "shove": "push", "c": "call", "call": "call", "f": "fold", "fold": "fold"}


class RichPresenter:
    def __init__(self, *, no_color: bool = False, console: Console | None = None):
        if console is not None:
            self.console = console
        elif no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console()

    @staticmethod
    def _cards(cards: Sequence[str]) -> str:
        return " ".join(f"[{_SUIT_STYLE.get(card[-1:].lower(), 'white')}]{card}[/]" for card in cards)

    def show_spot(self, hero: Sequence[str], position: str, analysis: SpotAnalysisPayload) -> None:
        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Hand", f"{self._cards(hero)} from {position}")
        info.add_row("Equity", f"{analysis.equity:.1f}% ({analysis.hand_strength})")
        info.add_row("Pot odds / SPR", f"{analysis.pot_odds:.1f}% / {analysis.spr:.1f}")
        info.add_row("Villain range", f"{analysis.villain_range:.1f}% ({analysis.combos:.0f} combos)")
        if analysis.board_texture:
            info.add_row("Board", analysis.board_texture)
        info.add_row("Source", analysis.gto_source)
        self.console.print(Panel(info, title="Spot", border_style="magenta", expand=False))

        table = Table(show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("Action", style="bold")
        table.add_column("Freq", justify="right")
        table.add_column("EV (bb)", justify="right")
        for item in analysis.actions:
            table.add_row(item.action, f"{item.frequency * 100:.0f}%", f"{item.ev:+.2f}")
        self.console.print(table)

    def show_pushfold(self, result: PushFoldResult, cards: Sequence[str] = ()) -> None:
        scenario = result.scenario
        analysis = result.analysis
        hand = f"{self._cards(cards)} ({scenario.hand})" if cards else scenario.hand
        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Hand", hand)
        info.add_row(
            "Spot",
            f"{scenario.hero_position.upper()} {scenario.hero_stack_bb:g}bb, "
            f"{scenario.num_players}-handed, {scenario.training_mode} vs {scenario.opponent_type}",
        )
        info.add_row("Range", f"{len(result.adjusted_range)} of 169 classes (baseline {len(result.baseline_range)})")
        style = "green" if result.correct_action != "fold" else "yellow"
        info.add_row("Answer", f"[{style}]{result.correct_action}[/]")
        info.add_row(f"EV {analysis.mode}", f"{analysis.ev_action:+.2f} bb vs fold 0.00")
        info.add_row("ICM value", f"${analysis.icm_value:,.2f} ({scenario.icm_mode})")
        if analysis.marginal_explanation:
            info.add_row("Note", analysis.marginal_explanation)
        self.console.print(Panel(info, title="Push/Fold", border_style="cyan", expand=False))

    def show_daily(self, label: str, questions: Sequence[ChallengeQuestion], *, reveal: bool = False) -> None:
        table = Table(title=f"Daily challenge {label}", show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Cards")
        table.add_column("Hand")
        table.add_column("Spot")
        if reveal:
            table.add_column("Strategy", overflow="fold")
        for idx, question in enumerate(questions):
            row = [
                str(idx),
                self._cards([str(card) for card in question.hero_cards]),
                question.hand_class,
                f"{question.hero_position} vs {question.villain_position} ({question.scenario.value})",
            ]
            if reveal:
                row.append(
                    ", ".join(
                        f"{entry.action} {entry.frequency:g}%" for entry in question.strategy.actions if entry.frequency
                    )
                )
            table.add_row(*row)
        self.console.print(table)
        if not questions:
            self.console.print("[dim]No questions could be generated for this date.[/]")

    # ------------------------------------------------------------------ drills
    def show_drill_spot(self, number: int, total: int, drill_round: DrillRound) -> None:
        scenario = drill_round.scenario
        villains = ", ".join(f"{stack:g}bb" for stack in scenario.villain_stacks_bb)
        self.console.print(
            f"\n[bold]Spot {number}/{total}[/] {self._cards([str(card) for card in drill_round.cards])} "
            f"({scenario.hand}) {scenario.hero_position.upper()} {scenario.hero_stack_bb:g}bb vs {villains}, "
            f"{scenario.num_players}-handed, {scenario.icm_mode}"
        )

    def prompt_drill_action(self, mode: str) -> str | None:
        """Ask for push/fold (or call/fold); ``None`` means the user quit."""

        aggressive = "call" if mode == "call" else "push"
        while True:
            raw = input(f"{aggressive} or fold ({aggressive[0]}/f), or 'q' to quit: ").strip().lower()
            if raw == "q":
                return None
            action = _DRILL_KEYS.get(raw)
            if action in (aggressive, "fold"):
                return action
            self.console.print(f"[red]Invalid input[/]. Enter {aggressive[0]}, f or q.")

    def drill_feedback(self, result: DrillResult, drill_round: DrillRound) -> None:
        if result.correct:
            self.console.print(f"[green]Correct[/]: {result.action}")
        else:
            self.console.print(f"[red]Incorrect[/]: {result.action}, answer is {drill_round.result.correct_action}")
        self.show_pushfold(drill_round.result, [str(card) for card in drill_round.cards])

    def show_drill_summary(self, tracker: DrillTracker) -> None:
        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Spots", f"{tracker.correct}/{tracker.total} correct")
        info.add_row("Accuracy", f"{tracker.accuracy:.1f}%")
        info.add_row("Best streak", str(tracker.best_streak))
        self.console.print(Panel(info, title="Drill summary", border_style="cyan", expand=False))

        weaknesses = tracker.weaknesses()
        if not weaknesses:
            return
        table = Table(title="Weak spots", show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("Position")
        table.add_column("Stack")
        table.add_column("Mode")
        table.add_column("Accuracy", justify="right")
        for weakness in weaknesses:
            table.add_row(
                weakness.position.upper(),
                weakness.stack_band,
                weakness.training_mode,
                f"{weakness.accuracy:.0f}% ({weakness.errors}/{weakness.total} missed)",
            )
        self.console.print(table)
