from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence

from .config import EngineConfig, configure_logging


def _add_spot_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("cards", nargs=2, metavar="CARD", help="Hero hole cards, e.g. As Kd")
    p.add_argument("--position", required=True, help="Hero position (UTG, HJ, CO, BTN, SB, BB)")
    p.add_argument("--villain", default=None, help="Villain position")
    p.add_argument("--scenario", default="rfi", choices=("rfi", "vs_rfi", "vs_3bet"))
    p.add_argument("--street", default="preflop", choices=("preflop", "flop", "turn", "river"))
    p.add_argument("--board", nargs="*", default=[], metavar="CARD", help="Board cards for postflop streets")
    p.add_argument("--pot", type=float, default=6.0, help="Pot size in big blinds")
    p.add_argument("--stack", type=float, default=100.0, help="Effective stack in big blinds")


def _add_pushfold_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--hand", default=None, help="Hand class such as A5s; omitted = deal a random spot")
    p.add_argument("--stack", type=float, default=None, help="Hero stack in big blinds")
    p.add_argument("--position", default=None, choices=("btn", "sb", "bb"))
    p.add_argument("--players", type=int, default=2, choices=(2, 3))
    p.add_argument("--mode", default=None, choices=("push", "call"))
    p.add_argument("--opponent", default="nash", choices=("nash", "tight", "loose", "fish"))
    p.add_argument("--icm", default=None, choices=("chip_ev", "bubble", "asymmetric"))
    p.add_argument(
        "--difficulty",
        default=None,
        choices=("beginner", "intermediate", "advanced", "expert"),
        help="Constrain randomly dealt spots",
    )
    # If omitted, dealt spots use a random seed. Pass an int to reproduce.
    p.add_argument("--seed", type=int, default=None, help="RNG seed for dealt spots")
    p.add_argument("--rounds", type=int, default=None, metavar="N", help="Play N dealt spots and answer each one")


def _add_daily_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--date", default=None, help="Challenge date YYYY-MM-DD (default: today)")
    p.add_argument("--reveal", action="store_true", help="Show the strategy for every question")
    p.add_argument(
        "--week-day",
        type=int,
        default=None,
        choices=range(1, 8),
        metavar="N",
        help="Day 1-7 of a week-long challenge starting on --date",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gtopreflop", description="Preflop decision evaluation engine")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--log-level", default=None, help="Logging level (default from GTOPREFLOP_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)
    _add_spot_args(sub.add_parser("spot", help="Analyze a single preflop spot"))
    _add_pushfold_args(sub.add_parser("pushfold", help="Resolve or deal a push/fold spot"))
    _add_daily_args(sub.add_parser("daily", help="Show the daily challenge"))
    sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    return parser


def _run_spot(args: argparse.Namespace, config: EngineConfig, presenter) -> None:
    from .features.analysis import AnalysisService, SpotRequest

    request = SpotRequest(
        hero_hand=list(args.cards),
        board=list(args.board),
        hero_position=args.position.upper(),
        villain_position=args.villain.upper() if args.villain else None,
        street=args.street,
        pot_size=args.pot,
        stack_size=args.stack,
        scenario=args.scenario,
    )
    analysis = AnalysisService.from_config(config).analyze_spot(request)
    presenter.show_spot(args.cards, request.hero_position, analysis)


def _run_pushfold(args: argparse.Namespace, config: EngineConfig, presenter) -> None:
    from .pushfold import NashPushFoldResolver, PushFoldDrill, PushFoldScenario

    resolver = NashPushFoldResolver(config=config)
    if args.rounds is not None:
        if args.hand is not None:
            raise ValueError("--rounds deals its own hands; drop --hand")
        if args.rounds < 1:
            raise ValueError("--rounds must be at least 1")
        _run_drill(args, PushFoldDrill(resolver, seed=args.seed), presenter)
        return
    if args.hand is None:
        drill_round = _deal(args, PushFoldDrill(resolver, seed=args.seed))
        presenter.show_pushfold(drill_round.result, [str(card) for card in drill_round.cards])
        return

    stack = args.stack if args.stack is not None else 10.0
    mode = args.mode or "push"
    position = args.position or ("bb" if mode == "call" else "sb")
    scenario = PushFoldScenario(
        hand=args.hand,
        hero_stack_bb=stack,
        villain_stacks_bb=(stack,) * (args.players - 1),
        hero_position=position,
        num_players=args.players,
        training_mode=mode,
        opponent_type=args.opponent,
        icm_mode=args.icm or "chip_ev",
    )
    presenter.show_pushfold(resolver.evaluate(scenario))


def _deal(args: argparse.Namespace, drill):
    return drill.deal(
        num_players=args.players,
        stack_bb=args.stack,
        position=args.position,
        training_mode=args.mode,
        opponent_type=args.opponent,
        icm_mode=args.icm,
        difficulty=args.difficulty,
    )


def _run_drill(args: argparse.Namespace, drill, presenter) -> None:
    from .pushfold import DrillTracker

    tracker = DrillTracker()
    for number in range(1, args.rounds + 1):
        drill_round = _deal(args, drill)
        presenter.show_drill_spot(number, args.rounds, drill_round)
        started = time.perf_counter()
        action = presenter.prompt_drill_action(drill_round.scenario.training_mode)
        if action is None:
            break
        result = tracker.record(drill_round, action, time_ms=(time.perf_counter() - started) * 1000)
        presenter.drill_feedback(result, drill_round)
    presenter.show_drill_summary(tracker)


def _run_daily(args: argparse.Namespace, config: EngineConfig, presenter) -> None:
    from .challenge import DailyChallengeGenerator
    from .challenge.generator import seven_day_plan
    from .data.range_loader import RangeResolver, get_repository
    from .features.training.service import parse_challenge_date

    day = parse_challenge_date(args.date)
    generator = DailyChallengeGenerator(RangeResolver(get_repository(config.ranges_path), config.depth_split_bb))
    if args.week_day is not None:
        questions = generator.generate(seven_day_plan(day, args.week_day))
        label = f"{day.isoformat()} week day {args.week_day}"
    else:
        questions = generator.for_date(day)
        label = day.isoformat()
    presenter.show_daily(label, questions, reveal=args.reveal)


def main(argv: Sequence[str] | None = None) -> None:
    args = _build_parser().parse_args(list(argv) if argv is not None else sys.argv[1:])
    config = EngineConfig.from_env()
    configure_logging(args.log_level or config.log_level)

    if args.command == "serve":  # pragma: no cover - runner
        from .web.app import main as serve

        serve()
        return

    from .ui.presenters import RichPresenter

    presenter = RichPresenter(no_color=args.no_color)
    runners = {"spot": _run_spot, "pushfold": _run_pushfold, "daily": _run_daily}
    try:
        runners[args.command](args, config, presenter)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
