#!/usr/bin/env python3
"""
PartSim: Car-Part Production Line Simulator
============================================

Tick every machine once per simulated minute, flush production into
inventory at the end of each day, match customer orders against stock,
then print per-machine and per-order tables and save a Matplotlib
dashboard to ./reports/.

Usage
-----
    python main.py                                   # built-in sample factory
    python main.py --parts parts.csv --orders orders.csv --days 5 --minutes 480
    python main.py --scenario week --seed 99
    python main.py --text --no-charts                # plain report only
"""

import argparse
import logging
import sys
import time

from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from partsim.config import DEFAULT_SEED, MINUTES_PER_DAY, SCENARIOS, SIM_DAYS
from partsim.errors import PartSimError
from partsim.factory import FactoryScheduler
from partsim.loader import machines_from_config, orders_from_config
from partsim.reports import (
    console,
    plot_dashboard,
    print_banner,
    print_conveyors,
    print_kpi_table,
    print_machine_table,
    print_order_table,
    render_text_report,
)

REPORT_DIR = "reports"

logger = logging.getLogger("partsim")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


# ─────────────────────────────────────────────────────────────────────────────
# Simulation runner
# ─────────────────────────────────────────────────────────────────────────────

def build_factory(args: argparse.Namespace) -> FactoryScheduler:
    if args.parts or args.orders:
        if not (args.parts and args.orders):
            raise PartSimError("--parts and --orders must be given together")
        return FactoryScheduler.from_files(args.parts, args.orders, seed=args.seed)
    return FactoryScheduler(machines_from_config(), orders_from_config(), seed=args.seed)


def run_simulation(
    factory: FactoryScheduler,
    days: int,
    minutes: int,
    progress: Progress | None = None,
    task_id=None,
    show_belts: bool = False,
) -> dict:
    """Run the factory and return its KPIs."""

    def _advance(day: int) -> None:
        if progress and task_id is not None:
            progress.advance(task_id, 1)

    last_day = factory.day + days

    def _belts(day: int) -> None:
        if show_belts and day == last_day:
            print_conveyors(factory)

    factory.run(days, minutes, on_day_end=_advance, on_shift_end=_belts)
    return factory.metrics.compute_kpis(factory.order_book)


# ─────────────────────────────────────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────────────────────────────────────

def main() -> int:
    parser = argparse.ArgumentParser(description="PartSim: Car-Part Production Line Sim")
    parser.add_argument("--parts",    default=None,
                        help="Machine/part CSV (default: built-in sample factory)")
    parser.add_argument("--orders",   default=None,
                        help="Order CSV (required with --parts)")
    parser.add_argument("--scenario", choices=list(SCENARIOS.keys()), default=None,
                        help="Day/minute preset (overrides --days/--minutes)")
    parser.add_argument("--days",     type=int, default=SIM_DAYS,
                        help=f"Days to simulate (default: {SIM_DAYS})")
    parser.add_argument("--minutes",  type=int, default=MINUTES_PER_DAY,
                        help=f"Minutes per day (default: {MINUTES_PER_DAY})")
    parser.add_argument("--seed",     type=int, default=DEFAULT_SEED,
                        help=f"Random seed for reproducibility (default: {DEFAULT_SEED})")
    parser.add_argument("--no-charts",  action="store_true",
                        help="Skip Matplotlib chart generation")
    parser.add_argument("--show-belts", action="store_true",
                        help="Print each conveyor belt before the day-end flush of the last day")
    parser.add_argument("--text",       action="store_true",
                        help="Print the plain-text report instead of Rich tables")
    parser.add_argument("--report-dir", default=REPORT_DIR,
                        help=f"Where charts are written (default: {REPORT_DIR})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging")
    args = parser.parse_args()

    configure_logging(args.verbose)

    days, minutes = args.days, args.minutes
    if args.scenario:
        days    = SCENARIOS[args.scenario]["days"]
        minutes = SCENARIOS[args.scenario]["minutes"]

    try:
        factory = build_factory(args)
    except PartSimError as exc:
        logger.error("Setup failed: %s", exc)
        return 2

    if not args.text:
        print_banner(days, minutes)

    wall_start = time.perf_counter()
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=35),
            MofNCompleteColumn(),
            TextColumn("days"),
            TimeElapsedColumn(),
            console=console,
            transient=args.text,
        ) as progress:
            task_id = progress.add_task("[cyan]Production[/cyan]", total=days)
            kpis = run_simulation(
                factory, days, minutes,
                progress=progress, task_id=task_id, show_belts=args.show_belts,
            )
    except PartSimError as exc:
        logger.error("Simulation failed: %s", exc)
        return 2

    wall_elapsed = time.perf_counter() - wall_start
    logger.info(
        "Simulated %d day(s) × %d min in %.2fs", days, minutes, wall_elapsed,
    )

    if args.text:
        console.print(render_text_report(factory), markup=False, highlight=False)
    else:
        print_machine_table(factory)
        print_order_table(factory)
        print_kpi_table(kpis)

    if not args.no_charts:
        path = plot_dashboard(factory, kpis, args.report_dir)
        if path:
            console.print(f"  [green]✓[/green]  {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
