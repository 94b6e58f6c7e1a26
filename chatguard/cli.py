"""chatguard CLI: moderate messages from the command line."""

import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from chatguard import __version__
from chatguard.moderation.config import (
    MODERATION_PRESETS,
    ConfigError,
    get_preset_config,
    load_config,
)

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """chatguard: content moderation for chat messages.

    Detects phone numbers, contact details, links and profanity in a
    message, decides whether it may be sent and prints a redacted copy.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("text", required=False)
@click.option(
    "--preset",
    "-p",
    default=None,
    type=click.Choice([level.value for level in MODERATION_PRESETS]),
    help="Built-in policy preset (default: moderate)",
)
@click.option("--config", "-c", "config_path", default=None, help="YAML moderation config file")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def check(ctx: click.Context, text: str | None, preset: str | None, config_path: str | None, as_json: bool):
    """Moderate a single message.

    TEXT is read from stdin when omitted or given as '-'. Exits with
    status 1 when the message is blocked.
    """
    from chatguard.moderation.engine import ModerationEngine

    if text is None or text == "-":
        text = sys.stdin.read().removesuffix("\n")

    if config_path and preset:
        raise click.UsageError("--preset and --config are mutually exclusive")

    try:
        if config_path:
            config = load_config(config_path)
        else:
            config = get_preset_config(preset or "moderate")
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/] {e}")
        ctx.exit(2)

    result = ModerationEngine(config).moderate(text)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_result(result)

    if not result.is_allowed:
        ctx.exit(1)


def _print_result(result) -> None:
    style = "green" if result.is_allowed else "red"
    console.print(Panel(escape(result.summary()), title="Moderation Result", style=style))

    if result.violations:
        table = Table(title=f"Violations ({len(result.violations)})")
        table.add_column("Category", style="cyan")
        table.add_column("Severity")
        table.add_column("Matches")
        table.add_column("Description")

        for v in result.violations:
            severity = "[red]block[/]" if v.severity.value == "block" else "[yellow]warning[/]"
            table.add_row(v.category.value, severity, escape(", ".join(v.matches)), v.description)

        console.print(table)

    console.print(f"\n[bold]Clean content:[/] {escape(result.clean_content)}", highlight=False)


# ── Presets ──────────────────────────────────────────────────────────


@main.command()
def presets():
    """Show the built-in policy presets."""
    levels = list(MODERATION_PRESETS)
    table = Table(title="Moderation Presets")
    table.add_column("Option", style="cyan")
    for level in levels:
        table.add_column(level.value, justify="center")

    rows = [MODERATION_PRESETS[level].to_dict() for level in levels]
    for key in rows[0]:
        if key == "moderation_level":
            continue
        cells = []
        for row in rows:
            value = row[key]
            if isinstance(value, bool):
                cells.append("[green]Y[/]" if value else "[red]N[/]")
            else:
                cells.append(", ".join(value) or "-")
        table.add_row(key, *cells)

    console.print(table)


# ── Languages ────────────────────────────────────────────────────────


@main.command()
def languages():
    """List the profanity lexicon languages."""
    from chatguard.filters.profanity import LEXICON

    table = Table(title="Profanity Lexicon")
    table.add_column("Language", style="cyan")
    table.add_column("Words", justify="right")

    for language in LEXICON.languages():
        table.add_row(language, str(len(LEXICON.words(language))))

    console.print(table)


if __name__ == "__main__":
    main()
