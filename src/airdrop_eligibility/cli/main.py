"""CLI for airdrop eligibility checks and trending rankings."""

import json
import logging
from enum import StrEnum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from airdrop_eligibility.core import EligibilityChecker, ProjectStatus, ProtocolRegistry, StatusWeights
from airdrop_eligibility.core.models import CheckResult, TrendingProjectSummary
from airdrop_eligibility.data import get_chain_names
from airdrop_eligibility.errors import AirdropEligibilityError
from airdrop_eligibility.sources import JsonChainDataSource, JsonProjectCatalog

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="airdrop-eligibility",
    help="Score wallet eligibility for airdrops from exported multi-chain activity",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _score_style(score: int) -> str:
    if score >= 75:
        return "bold green"
    if score >= 50:
        return "yellow"
    return "red"


@app.command()
def check(
    address: str = typer.Argument(..., help="Wallet address to check"),
    projects: Path = typer.Option(..., "--projects", "-p", help="JSON file with the project catalog"),
    transactions: Path | None = typer.Option(None, "--transactions", "-t", help="JSON file of transactions by chain id"),
    nfts: Path | None = typer.Option(None, "--nfts", "-n", help="JSON file of NFTs by chain id"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    equal_weights: bool = typer.Option(False, "--equal-weights", help="Weight every project status equally"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Check a wallet's eligibility across the project catalog.

    Examples:

        airdrop-eligibility check 0xABC... --projects projects.json --transactions txs.json

        airdrop-eligibility check 0xABC... -p projects.json -t txs.json -n nfts.json --format json
    """
    _configure_logging(debug)

    checker = EligibilityChecker(
        data_source=JsonChainDataSource(transactions, nfts),
        catalog=JsonProjectCatalog(projects),
        weights=StatusWeights.equal() if equal_weights else None,
    )

    try:
        result = checker.check(address)
    except AirdropEligibilityError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1)

    if format == OutputFormat.JSON:
        console.print_json(result.model_dump_json())
    else:
        _output_check_table(result)


@app.command()
def trending(
    projects: Path = typer.Option(..., "--projects", "-p", help="JSON file with the project catalog"),
    limit: int = typer.Option(5, "--limit", "-l", min=1, help="Number of projects to show"),
    status: list[ProjectStatus] | None = typer.Option(None, "--status", "-s", help="Only these statuses"),
    chain: str | None = typer.Option(None, "--chain", "-c", help="Only projects on this chain"),
    format: OutputFormat = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Rank catalog projects by trending score."""
    _configure_logging(debug)

    checker = EligibilityChecker(data_source=JsonChainDataSource(), catalog=JsonProjectCatalog(projects))

    try:
        summaries = checker.trending(limit=limit, status=status, chain=chain)
    except AirdropEligibilityError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1)

    if format == OutputFormat.JSON:
        console.print_json(json.dumps([s.model_dump(mode="json") for s in summaries]))
    else:
        _output_trending_table(summaries)


@app.command()
def list_protocols() -> None:
    """List all known protocol contracts."""
    table = Table(title="Known Protocols", show_header=True, header_style="bold magenta")
    table.add_column("Protocol", style="cyan")
    table.add_column("Category", style="yellow")
    table.add_column("Contract", style="green")

    for address, info in ProtocolRegistry.from_config().items():
        table.add_row(info.name, info.category.value, address)

    console.print(table)


@app.command()
def list_chains() -> None:
    """List all known chains."""
    table = Table(title="Supported Chains", show_header=True, header_style="bold magenta")
    table.add_column("Chain ID", style="cyan", justify="right")
    table.add_column("Chain", style="green")

    for chain_id, name in get_chain_names().items():
        table.add_row(str(chain_id), name)

    console.print(table)


def _output_check_table(result: CheckResult) -> None:
    """Output eligibility as rich tables."""
    table = Table(
        title=f"Eligibility for {result.address[:10]}...{result.address[-8:]}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Project", style="cyan")
    table.add_column("Status", style="blue")
    table.add_column("Score", justify="right")
    table.add_column("Criteria met", justify="right")

    for airdrop in result.airdrops:
        met = sum(1 for c in airdrop.criteria if c.met)
        table.add_row(
            airdrop.project_name,
            airdrop.status.value,
            f"[{_score_style(airdrop.score)}]{airdrop.score}[/]",
            f"{met}/{len(airdrop.criteria)}",
        )

    console.print("\n")
    console.print(table)
    console.print(
        f"\n[bold]Overall score:[/bold] [{_score_style(result.overall_score)}]{result.overall_score}[/]\n"
    )


def _output_trending_table(summaries: list[TrendingProjectSummary]) -> None:
    """Output trending ranking as rich table."""
    if not summaries:
        console.print("\n[yellow]No projects match[/yellow]")
        return

    table = Table(title="Trending Airdrops", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Project", style="cyan")
    table.add_column("Status", style="blue")
    table.add_column("Score", style="bold green", justify="right")
    table.add_column("Signals", style="dim")

    for rank, summary in enumerate(summaries, start=1):
        table.add_row(
            str(rank),
            summary.name,
            summary.status.value,
            str(summary.trending_score),
            ", ".join(signal.label for signal in summary.signals),
        )

    console.print("\n")
    console.print(table)


if __name__ == "__main__":
    app()
