"""Rich console rendering of council runs and rosters."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from council.models import CouncilConfig, CouncilRunResult, IndividualResponse

console = Console(legacy_windows=False)


def _response_preview(response: IndividualResponse, words: int = 50) -> str:
    """Return first N words of a response."""
    all_words = response.response.split()
    preview = " ".join(all_words[:words])
    if len(all_words) > words:
        preview += "..."
    return preview


def print_stage1_summary(result: CouncilRunResult) -> None:
    console.print(Rule("[bold cyan]Stage 1: Individual Responses[/bold cyan]"))
    if not result.individual_responses:
        console.print("[red]No member responded.[/red]")
        return
    for resp in result.individual_responses:
        console.print(
            Panel(
                _response_preview(resp),
                title=f"[bold]{resp.member}[/bold] ({resp.provider}/{resp.model})",
                border_style="dim",
            )
        )


def print_rankings(result: CouncilRunResult) -> None:
    """Show who ranked what (labels resolved to members) and the consensus order."""
    if not result.peer_rankings:
        return
    console.print(Rule("[bold cyan]Stage 2: Peer Rankings[/bold cyan]"))

    reviews = Table(show_header=True, header_style="bold")
    reviews.add_column("Reviewer")
    reviews.add_column("Ranking (best first)")
    for ranking in result.peer_rankings:
        resolved = [
            f"{label} ({result.label_to_member.get(label, '?')})" for label in ranking.parsed_ranking
        ]
        reviews.add_row(ranking.member, ", ".join(resolved) or "[dim]unparsed[/dim]")
    console.print(reviews)

    aggregate = Table(title="Aggregate Ranking", show_header=True, header_style="bold")
    aggregate.add_column("#", justify="right")
    aggregate.add_column("Member")
    aggregate.add_column("Avg. rank", justify="right")
    aggregate.add_column("Votes", justify="right")
    for position, entry in enumerate(result.aggregate_rankings, start=1):
        aggregate.add_row(str(position), entry.member, f"{entry.average_rank:.2f}", str(entry.rankings_count))
    console.print(aggregate)


def print_final_answer(result: CouncilRunResult) -> None:
    console.print(Rule("[bold green]Council Answer[/bold green]"))
    answer = result.final_answer
    console.print(
        Text(
            f"Chairman: {answer.chairman} ({answer.provider}/{answer.model}) | "
            f"Responses: {len(result.individual_responses)} | "
            f"Rankings: {len(result.peer_rankings)}",
            style="dim",
        )
    )
    if result.is_degraded:
        console.print(Text(answer.response, style="red"))
    else:
        console.print(Markdown(answer.response))


def print_council_config(config: CouncilConfig) -> None:
    table = Table(title="Council", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Provider")
    table.add_column("Model")
    for member in config.members:
        table.add_row(member.name, member.provider, member.model)
    console.print(table)
    chairman = config.chairman
    console.print(f"Chairman: [bold]{chairman.name}[/bold] ({chairman.provider}/{chairman.model})")
