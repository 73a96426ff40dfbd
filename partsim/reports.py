"""
Plain-text report, Rich console output and Matplotlib dashboard generation.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import CONVEYOR_LENGTH, FACTORY_LOCATION, FACTORY_NAME

if TYPE_CHECKING:
    from .factory import FactoryScheduler

console = Console()

STATUS_COLORS = {
    "FULFILLED": "#2EC4B6",
    "PENDING":   "#E63946",
}
TYPE_COLORS = ["#2E86AB", "#A23B72", "#F18F01", "#E63946", "#2EC4B6", "#708090"]


def _type_color(idx: int) -> str:
    return TYPE_COLORS[idx % len(TYPE_COLORS)]


# ─────────────────────────────────────────────────────────────────────────────
# Plain-text report
# ─────────────────────────────────────────────────────────────────────────────

def render_text_report(factory: "FactoryScheduler") -> str:
    """
    Per-machine production / defect / stock counts followed by every order
    and its status.
    """
    report = "\t\t\tREPORT\n\n"
    report += "Parts Produced per Machine\n"
    for line in factory.lines:
        type_id = line.part.type_id
        report += (
            f"{line}\t({factory.defect_count(type_id)} defective)"
            f"\t({factory.inventory_count(type_id)} in inventory)\n"
        )

    report += "\nORDERS\n\n"
    for order in factory.orders:
        report += f"{order}\n"
    return report


# ─────────────────────────────────────────────────────────────────────────────
# Rich console output
# ─────────────────────────────────────────────────────────────────────────────

def print_banner(days: int, minutes: int) -> None:
    lines = [
        f"[bold white]{FACTORY_NAME}[/bold white]",
        f"[dim]{FACTORY_LOCATION}[/dim]",
        "",
        "[bold cyan]Car-Part Production Line Simulation[/bold cyan]",
        f"[dim]PartSim  ·  SimPy clock  ·  {days} day(s) × {minutes} min  ·  "
        f"{CONVEYOR_LENGTH}-slot conveyors[/dim]",
    ]
    console.print(Panel("\n".join(lines), style="bold blue", expand=False))
    console.print()


def print_machine_table(factory: "FactoryScheduler") -> None:
    console.rule("[bold]Parts Produced per Machine[/bold]")

    t = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold magenta")
    t.add_column("Machine",      style="cyan", justify="right")
    t.add_column("Part",         style="white", min_width=16)
    t.add_column("Period (min)", justify="right")
    t.add_column("Produced",     justify="right")
    t.add_column("Defective",    justify="right")
    t.add_column("In inventory", justify="right")

    for line in factory.lines:
        type_id = line.part.type_id
        defects = factory.defect_count(type_id)
        t.add_row(
            str(line.id),
            line.part.name,
            str(line.period),
            f"{line.produced_count:,d}",
            f"[red]{defects:,d}[/red]" if defects else "0",
            f"{factory.inventory_count(type_id):,d}",
        )

    console.print(t)
    console.print()


def print_order_table(factory: "FactoryScheduler") -> None:
    console.rule("[bold]Orders[/bold]")

    t = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold magenta")
    t.add_column("Order",    style="cyan", justify="right")
    t.add_column("Customer", style="white", min_width=20)
    t.add_column("Parts",    justify="right")
    t.add_column("Units",    justify="right")
    t.add_column("Status")

    for order in factory.orders:
        colour = "green" if order.fulfilled else "yellow"
        t.add_row(
            str(order.id),
            order.customer_name,
            str(order.part_count),
            f"{order.total_units:,d}",
            f"[{colour}]{order.status.value}[/{colour}]",
        )

    console.print(t)
    console.print()


def print_kpi_table(kpis: dict) -> None:
    console.rule("[bold]Run Summary[/bold]")

    t = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold magenta")
    t.add_column("KPI",   style="cyan",  min_width=28)
    t.add_column("Value", style="white", justify="right", min_width=14)

    def pct_style(v, good_above=90):
        colour = "green" if v >= good_above else ("yellow" if v >= 50 else "red")
        return f"[{colour}]{v:.1f}%[/{colour}]"

    t.add_row("Days simulated",           f"{kpis['days_simulated']:,d}")
    t.add_row("Parts produced",           f"{kpis['total_produced']:,d}")
    t.add_row("  accepted",               f"{kpis['total_accepted']:,d}")
    t.add_row("  defective",              f"{kpis['total_defective']:,d}")
    t.add_row("Defect rate",              f"{kpis['defect_rate_pct']:.1f}%")
    t.add_row("Flushed from conveyors",   f"{kpis['flushed_in_transit']:,d}")
    t.add_row("Orders fulfilled",
              f"{kpis['orders_fulfilled']:,d} / {kpis['total_orders']:,d}")
    t.add_row("Order fill rate",          pct_style(kpis["fill_rate_pct"]))
    t.add_row("Unit fill rate",           pct_style(kpis["unit_fill_rate_pct"]))

    console.print(t)
    console.print()


def print_conveyors(factory: "FactoryScheduler") -> None:
    console.rule("[bold]Conveyor Belts[/bold]")
    for line in factory.lines:
        console.print(line.render_conveyor(), markup=False, highlight=False)
    console.print()


# ─────────────────────────────────────────────────────────────────────────────
# Matplotlib dashboard
# ─────────────────────────────────────────────────────────────────────────────

def _style_ax(ax, title):
    ax.set_title(title, fontsize=9, fontweight="bold", pad=6)
    ax.tick_params(labelsize=7)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(axis="y", alpha=0.3)


def plot_dashboard(factory: "FactoryScheduler", kpis: dict, out_dir: str) -> str:
    """
    Generate a 2×2 matplotlib dashboard for one run.
    Returns the saved file path, or ``""`` if no day has been simulated.
    """
    snaps = factory.metrics.daily_snapshots
    if not snaps:
        return ""

    days     = [s.day for s in snaps]
    type_ids = list(factory.catalog)

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    fig.suptitle(
        f"{FACTORY_NAME}  ·  {len(days)}-day run  ·  "
        f"{kpis['total_produced']:,d} parts produced",
        fontsize=11, fontweight="bold",
    )
    plt.subplots_adjust(hspace=0.45, wspace=0.30)

    # ── (0,0) Inventory level per part type ────────────────────────────────
    ax = axes[0][0]
    for idx, type_id in enumerate(type_ids):
        vals = [s.inventory.get(type_id, 0) for s in snaps]
        ax.plot(days, vals, color=_type_color(idx),
                label=factory.catalog[type_id].name, linewidth=1.4)
    ax.set_ylabel("Units in stock", fontsize=8)
    ax.set_xlabel("Day", fontsize=8)
    ax.legend(fontsize=6)
    _style_ax(ax, "Inventory (end of day, before matching)")

    # ── (0,1) Daily defects per part type (stacked) ─────────────────────────
    ax = axes[0][1]
    bottom = np.zeros(len(days))
    for idx, type_id in enumerate(type_ids):
        cumulative = np.array([s.defects.get(type_id, 0) for s in snaps])
        daily      = np.diff(cumulative, prepend=0)
        ax.bar(days, daily, bottom=bottom, color=_type_color(idx),
               label=factory.catalog[type_id].name, alpha=0.85, width=0.9)
        bottom += daily
    ax.set_ylabel("Defective units / day", fontsize=8)
    ax.set_xlabel("Day", fontsize=8)
    ax.legend(fontsize=6)
    _style_ax(ax, "Daily Defects by Part")

    # ── (1,0) Weight deviation histogram ────────────────────────────────────
    ax = axes[1][0]
    weights = factory.metrics.weights_by_type()
    for idx, type_id in enumerate(type_ids):
        line_weights = weights.get(type_id)
        if not line_weights:
            continue
        base = factory.catalog[type_id].weight
        dev  = (np.array(line_weights) - base) / base * 100 if base else np.array(line_weights)
        ax.hist(dev, bins=20, alpha=0.5, color=_type_color(idx),
                label=factory.catalog[type_id].name)
    ax.set_xlabel("Deviation from nominal weight (%)", fontsize=8)
    ax.set_ylabel("Units", fontsize=8)
    ax.legend(fontsize=6)
    _style_ax(ax, "Weight Distribution")

    # ── (1,1) Order status ─────────────────────────────────────────────────
    ax = axes[1][1]
    labels = ["FULFILLED", "PENDING"]
    vals   = [kpis["orders_fulfilled"], kpis["orders_pending"]]
    bars   = ax.bar(labels, vals, color=[STATUS_COLORS[l] for l in labels], alpha=0.85)
    for bar, v in zip(bars, vals):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height(),
                f"{v:d}", ha="center", va="bottom", fontsize=8)
    ax.set_ylabel("Orders", fontsize=8)
    _style_ax(ax, f"Order Status (fill rate {kpis['fill_rate_pct']:.0f}%)")

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, "dashboard.png")
    fig.savefig(path, dpi=130, bbox_inches="tight")
    plt.close(fig)
    return path
