"""Click CLI: loads settings, builds the Council, runs it and edits the roster."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import load_config
from council.healthcheck import run_health_checks
from council.models import CouncilMember
from council.output import (
    console,
    print_council_config,
    print_final_answer,
    print_rankings,
    print_stage1_summary,
)
from council.pipeline import Council
from council.roster import RosterError, add_member, remove_member, set_chairman

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _load_council() -> Council:
    load_dotenv()
    try:
        config = load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)
    return Council.from_app_config(config)


def _save_or_exit(council: Council, edit) -> None:
    """Apply a roster edit and persist it, or print the rejection and exit 1."""
    try:
        updated = edit(council.get_effective_config())
        council.save_config(updated)
    except RosterError as exc:
        console.print(f"[bold red]Rejected:[/bold red] {exc}")
        sys.exit(1)
    print_council_config(updated)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(verbose: bool) -> None:
    """Agent Council -- ask several models, let them rank each other, get one answer."""
    # Model replies may contain characters the Windows console code page can't encode.
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8", errors="replace")
    _setup_logging(verbose)


@main.command()
@click.argument("question", required=False)
@click.option("--file", "question_file", type=click.Path(exists=True), help="Read question from a text file")
@click.option("--title", "with_title", is_flag=True, help="Also generate a short conversation title")
def ask(question: str | None, question_file: str | None, with_title: bool) -> None:
    """Run the full council on QUESTION.

    \b
    Examples:
      council ask "What is 2+2?"
      council ask --file question.md --title
    """
    if question_file:
        question_text = Path(question_file).read_text(encoding="utf-8").strip()
    elif question:
        question_text = question
    else:
        console.print("[bold red]Error:[/bold red] Provide a QUESTION argument or --file.")
        sys.exit(1)

    council = _load_council()
    if not council.is_any_provider_configured():
        console.print("[bold red]Error:[/bold red] No provider has an API key. Check .env.")
        sys.exit(1)

    roster = council.get_effective_config()
    console.print(f"\n[bold cyan]Agent Council[/bold cyan]: {len(roster.members)} members")
    console.print(f"Members: {', '.join(m.name for m in roster.members)}")
    console.print(f"Chairman: {roster.chairman.name}")
    console.print(f"Question: [italic]{question_text[:80]}{'...' if len(question_text) > 80 else ''}[/italic]\n")

    async def _run():
        title = await council.generate_title(question_text) if with_title else None
        result = await council.run_council(question_text, roster)
        return title, result

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Council deliberating...", total=None)
        title, result = asyncio.run(_run())

    if title:
        console.print(f"[bold]{title}[/bold]\n")
    print_stage1_summary(result)
    print_rankings(result)
    print_final_answer(result)

    if result.is_degraded:
        sys.exit(2)


@main.group(name="config")
def config_group() -> None:
    """Show or edit the saved council roster."""


@config_group.command(name="show")
def config_show() -> None:
    """Print the effective roster (saved, or the default)."""
    print_council_config(_load_council().get_effective_config())


@config_group.command(name="reset")
def config_reset() -> None:
    """Overwrite the saved roster with the default."""
    council = _load_council()
    print_council_config(council.reset_config())
    console.print("[green]Council reset to default configuration[/green]")


@config_group.command(name="add-member")
@click.argument("name")
@click.argument("provider")
@click.argument("model")
def config_add_member(name: str, provider: str, model: str) -> None:
    """Add NAME served by PROVIDER/MODEL to the roster."""
    council = _load_council()
    member = CouncilMember(name=name, provider=provider, model=model)
    _save_or_exit(council, lambda cfg: add_member(cfg, member, council.max_members))


@config_group.command(name="remove-member")
@click.argument("name")
def config_remove_member(name: str) -> None:
    """Remove NAME from the roster."""
    council = _load_council()
    _save_or_exit(council, lambda cfg: remove_member(cfg, name, council.min_members))


@config_group.command(name="set-chairman")
@click.argument("name")
@click.argument("provider")
@click.argument("model")
def config_set_chairman(name: str, provider: str, model: str) -> None:
    """Make NAME served by PROVIDER/MODEL the chairman."""
    council = _load_council()
    chairman = CouncilMember(name=name, provider=provider, model=model)
    _save_or_exit(council, lambda cfg: set_chairman(cfg, chairman))


@main.command()
@click.option("--check", is_flag=True, help="Ping every roster model and the chairman")
def providers(check: bool) -> None:
    """Show which providers have API keys, optionally pinging roster models."""
    council = _load_council()
    for name, ok in sorted(council.provider_availability().items()):
        status = "[green]configured[/green]" if ok else "[dim]no API key[/dim]"
        console.print(f"  {name:<12} {status}")

    if not check:
        return

    roster = council.get_effective_config()
    console.print("\n[bold]Checking members...[/bold]")
    results = asyncio.run(run_health_checks(council.registry, [*roster.members, roster.chairman]))
    failed = 0
    for member, (ok, err) in results.items():
        name = f"{member.name} ({member.provider}/{member.model})"
        if ok:
            console.print(f"  [green]OK  [/green] {name}")
        else:
            failed += 1
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [red]FAIL[/red] {name}: {short_err}")
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
