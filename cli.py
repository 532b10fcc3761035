#!/usr/bin/env python3
import argparse
import logging
import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from rebalancing_engine import (
    ActionType,
    AnalysisResult,
    AnalysisStatus,
    Holding,
    RebalancingError,
    RebalancingService,
    Recommendation,
    StrategyKey,
)

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_BUDGET = Decimal("100000")
DEFAULT_DAYS_SINCE_REBALANCE = 30

# Sample universe with reference prices; the engine never fetches market data
PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("227.52"),
    "MSFT": Decimal("415.10"),
    "GOOGL": Decimal("163.24"),
    "TSLA": Decimal("248.50"),
    "NVDA": Decimal("118.85"),
}

TARGET_ALLOCATION: dict[str, Decimal] = {
    "AAPL": Decimal("30"),
    "MSFT": Decimal("25"),
    "GOOGL": Decimal("20"),
    "TSLA": Decimal("15"),
    "NVDA": Decimal("10"),
}

STATUS_STYLES: dict[AnalysisStatus, str] = {
    AnalysisStatus.URGENT: "bold red",
    AnalysisStatus.NEEDED: "yellow",
    AnalysisStatus.OPTIONAL: "cyan",
    AnalysisStatus.BALANCED: "green",
}

ACTION_STYLES: dict[ActionType, str] = {
    ActionType.BUY: "green",
    ActionType.SELL: "red",
    ActionType.HOLD: "dim",
}


def build_drifted_holdings(
    prices: dict[str, Decimal],
    allocation: dict[str, Decimal],
    budget: Decimal = DEFAULT_BUDGET,
) -> list[Holding]:
    """Distribute budget with random weights to simulate a drifted portfolio."""
    weights = [random.random() for _ in allocation]
    total_w = sum(weights)
    holdings = []
    for sym, w in zip(allocation, weights):
        qty = max(1, int(budget * Decimal(str(w / total_w)) / prices[sym]))
        holdings.append(Holding(symbol=sym, quantity=Decimal(qty), current_price=prices[sym]))
    return holdings


def _deviation_color(deviation: Decimal) -> str:
    if abs(deviation) <= Decimal("5"):
        return "green"
    return "red" if deviation > 0 else "blue"


def analysis_table(analysis: AnalysisResult, title: str) -> Table:
    """Build a Rich table showing current vs target weights per symbol."""
    t = Table(title=title, box=box.ROUNDED, title_style="bold white")
    t.add_column("Symbol", style="cyan")
    t.add_column("Current", justify="right", style="yellow")
    t.add_column("Target", justify="right", style="green")
    t.add_column("Deviation", justify="right")

    for entry in analysis.entries:
        t.add_row(
            entry.symbol,
            f"{entry.current_weight:.1f}%",
            f"{entry.target_weight:.1f}%",
            Text(f"{entry.deviation:+.1f}%", style=_deviation_color(entry.deviation)),
        )

    t.add_section()
    t.add_row(
        "Status",
        "",
        "",
        Text(analysis.status.value, style=STATUS_STYLES[analysis.status]),
    )
    t.add_row("Max drift", "", "", f"{analysis.max_deviation:.1f}% ({analysis.max_deviation_symbol})")
    return t


def actions_table(recommendation: Recommendation) -> Table:
    """Build a Rich table showing the recommended actions."""
    t = Table(title="Recommended Actions", box=box.ROUNDED, title_style="bold white")
    t.add_column("#", justify="right", style="dim")
    t.add_column("Action", no_wrap=True)
    t.add_column("Symbol", style="cyan")
    t.add_column("Shares", justify="right")
    t.add_column("Amount", justify="right")
    t.add_column("Deviation", justify="right")

    buy_total = sell_total = Decimal(0)
    for action in recommendation.actions:
        if action.action_type is ActionType.BUY:
            buy_total += action.estimated_amount
        elif action.action_type is ActionType.SELL:
            sell_total += action.estimated_amount
        t.add_row(
            str(action.priority),
            Text(action.action_type.value, style=f"bold {ACTION_STYLES[action.action_type]}"),
            action.symbol,
            f"{action.quantity_change:+}",
            f"${action.estimated_amount:,.2f}",
            f"{action.deviation:+.1f}%",
        )

    t.add_section()
    t.add_row(
        "",
        "",
        "[bold]Trades[/bold]",
        "",
        f"[green]+${buy_total:,.2f}[/green]  [red]-${sell_total:,.2f}[/red]",
        "",
    )
    t.add_row(
        "", "", "[dim]Est. cost[/dim]", "", f"[dim]${recommendation.estimated_transaction_cost:,.2f}[/dim]", ""
    )
    return t


def display_recommendation(recommendation: Recommendation) -> None:
    console.print(f"  [bold]{recommendation.strategy_name}[/bold] · {recommendation.notes}")
    console.print(f"  [dim]Next review: {recommendation.next_review_date:%Y-%m-%d}[/dim]")
    if not recommendation.rebalancing_needed:
        console.print("[green]  No rebalancing needed.[/green]")
        return
    console.print(actions_table(recommendation))


def _strategy_overview(service: RebalancingService) -> Table:
    t = Table(title="Strategies", box=box.ROUNDED, title_style="bold white")
    t.add_column("Key", style="cyan")
    t.add_column("Name")
    t.add_column("Complexity", justify="center")
    t.add_column("Suitable for", style="dim")
    for key, info in service.list_strategies().items():
        t.add_row(key, info.name, info.complexity.value, ", ".join(info.suitable_for))
    return t


def run_cli_loop(service: RebalancingService) -> None:
    keys = [k.value for k in StrategyKey]

    while True:
        holdings = build_drifted_holdings(PRICES, TARGET_ALLOCATION)
        total = sum((h.market_value for h in holdings), start=Decimal("0"))

        console.print()
        analysis = service.quick_analysis_from_holdings(holdings, TARGET_ALLOCATION)
        console.print(analysis_table(analysis, f"Sample portfolio · ${total:,.2f}"))

        console.print()
        console.print(_strategy_overview(service))
        strategy = Prompt.ask("  Strategy", choices=keys, default=StrategyKey.THRESHOLD_BASED.value)

        last_rebalance = None
        if strategy != StrategyKey.THRESHOLD_BASED.value:
            days = IntPrompt.ask("  Days since last rebalance", default=DEFAULT_DAYS_SINCE_REBALANCE)
            last_rebalance = datetime.now(timezone.utc) - timedelta(days=days)

        console.print()
        try:
            recommendation = service.generate_recommendation(
                strategy,
                holdings,
                TARGET_ALLOCATION,
                total,
                last_rebalance=last_rebalance,
                portfolio_id="sample",
            )
        except RebalancingError as e:
            console.print(f"[red]  {e}[/red]")
        else:
            display_recommendation(recommendation)

        console.print()
        if not Confirm.ask("  Run again?", default=True):
            break


def main() -> None:
    """Entry point for the CLI application."""
    parser = argparse.ArgumentParser(description="Portfolio rebalancing recommendations")
    parser.add_argument("--seed", type=int, help="Seed for the simulated drift")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show engine logs")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(console=console)]
        )
    if args.seed is not None:
        random.seed(args.seed)

    console.print()
    console.print(
        Panel("[bold]Rebalancing Engine[/bold] · analyze & recommend", box=box.DOUBLE)
    )

    run_cli_loop(RebalancingService())


if __name__ == "__main__":
    main()
