import json
import logging
import click
import yaml
from pathlib import Path
from rich.console import Console
from rich.markup import escape

from stylepack.config import settings
from stylepack.errors import StylePackError
from stylepack.lint.validator import validate
from stylepack.models import ValidationContext
from stylepack.packs.loader import MANIFEST_FILE, PackStore
from stylepack.pipelines.pack_tests import run_pack_tests
from stylepack.pipelines.rewrite import format_changes, generate_diff, rewrite_with_mode
from stylepack.prompt_builder import build_rewrite_prompt
from stylepack.voice_context import VoiceContextManager

console = Console()
err_console = Console(stderr=True)

CONTENT_TYPES = ["ui-copy", "marketing", "docs", "support", "general"]


def create_pack(pack_dir: Path, name: str):
    """Initialize a starter pack without overwriting existing files."""
    pack_dir.mkdir(parents=True, exist_ok=True)

    starter_files = {
        MANIFEST_FILE: {
            "name": name,
            "version": "0.1.0",
            "description": f"Starter style pack for {name}",
            "files": {
                "voice": "voice.yaml",
                "copyPatterns": "copy_patterns.yaml",
                "ctaRules": "cta_rules.yaml",
                "tokens": "tokens.json",
                "tests": "tests.yaml",
            },
            "config": {"strictMode": False, "minScore": 70},
        },
        "voice.yaml": {
            "version": "1.0",
            "name": f"{name} voice",
            "tone": {
                "attributes": [
                    {"name": "clear", "weight": 0.9, "description": "Say it plainly"},
                    {"name": "friendly", "weight": 0.6},
                ],
                "summary": "Clear, direct and friendly",
            },
            "vocabulary": {
                "rules": [
                    {"preferred": "use", "avoid": ["utilize", "leverage"]},
                    {"preferred": "help", "avoid": ["facilitate"]},
                ],
                "forbidden": ["synergy", "best-in-class"],
                "encouraged": ["simple", "fast"],
            },
            "doNot": [
                {
                    "pattern": "going forward",
                    "reason": "Corporate jargon",
                    "severity": "warning",
                    "suggestion": "from now on",
                },
            ],
            "constraints": {
                "maxSentenceLength": 25,
                "maxParagraphLength": 5,
                "contractions": "allowed",
                "oxfordComma": True,
            },
        },
        "copy_patterns.yaml": {"version": "1.0", "name": f"{name} patterns", "patterns": []},
        "cta_rules.yaml": {
            "version": "1.0",
            "name": f"{name} CTAs",
            "guidelines": {
                "maxWords": 4,
                "capitalization": "sentence",
                "avoidWords": ["click", "submit"],
                "preferWords": ["get", "start", "try"],
            },
            "antiPatterns": [
                {"pattern": "click here", "reason": "Not descriptive", "suggestion": "Describe the action"},
            ],
        },
        "tests.yaml": {
            "version": "1.0",
            "name": f"{name} tests",
            "tests": [
                {
                    "id": "clean-copy",
                    "name": "Plain copy passes",
                    "input": "Start your project in minutes.",
                    "expect": {"pass": True, "minScore": 90},
                    "tags": ["smoke"],
                },
                {
                    "id": "jargon",
                    "name": "Vocabulary rules fire",
                    "input": "We utilize synergy.",
                    "expect": {"pass": False, "violations": [{"rule": "vocabulary"}]},
                    "tags": ["vocabulary"],
                },
            ],
        },
    }

    for filename, data in starter_files.items():
        path = pack_dir / filename
        if path.exists():
            continue
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        console.print(f"[green]✓[/green] Created {path}")

    tokens_path = pack_dir / "tokens.json"
    if not tokens_path.exists():
        tokens = {"name": f"{name} tokens", "colors": {}, "typography": {}, "spacing": {}, "effects": {}}
        tokens_path.write_text(json.dumps(tokens, indent=2))
        console.print(f"[green]✓[/green] Created {tokens_path}")

    console.print(f"[green]✓[/green] Pack ready: {pack_dir}")


def _store() -> PackStore:
    return PackStore(settings.packs_root)


def _load(store: PackStore, pack_name: str):
    result = store.load(pack_name)
    if result.errors:
        err_console.print(f"[yellow]Pack warnings:[/yellow] {escape(', '.join(result.errors))}")
    return result.pack


def _read_input(text, file) -> str:
    if file:
        with open(file, "r") as f:
            return f.read()
    if not text:
        raise click.UsageError("No text provided. Use an argument or --file")
    return text


def _context(content_type, component):
    if not content_type and not component:
        return None
    return ValidationContext(type=content_type, component=component)


def _dump(model) -> str:
    return model.model_dump_json(indent=2, by_alias=True)


@click.group()
def cli():
    """stylepack: validate and rewrite copy against brand style packs."""
    pass


@cli.command("init-pack")
@click.argument("name")
def init_pack(name):
    """Create a starter pack under the packs root."""
    try:
        create_pack(settings.packs_root / name, name)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.exceptions.Exit(1)


@cli.command()
def packs():
    """List available style packs."""
    names = _store().list_available_packs()
    if not names:
        console.print(f"[yellow]No packs found in {settings.packs_root}[/yellow]")
        return
    console.print("[bold]Available packs:[/bold]")
    for name in names:
        console.print(f"  - {name}")


@cli.command()
@click.option("-p", "--pack", "pack_name", default=None, help="Style pack to inspect")
@click.option(
    "-s", "--section",
    type=click.Choice(["voice", "patterns", "ctas", "tokens", "tests"]),
    help="Section to show",
)
def inspect(pack_name, section):
    """Show a pack's manifest or one of its sections."""
    try:
        pack = _load(_store(), pack_name or settings.default_pack)
        sections = {
            "voice": pack.voice,
            "patterns": pack.copy_patterns,
            "ctas": pack.cta_rules,
            "tokens": pack.tokens,
            "tests": pack.tests,
        }
        if section:
            click.echo(_dump(sections[section]))
            return

        manifest = pack.manifest
        console.print(f"[bold]{manifest.name}[/bold] v{manifest.version}")
        if manifest.description:
            console.print(manifest.description)
        if pack.voice.tone.summary:
            console.print(f"Tone: {pack.voice.tone.summary}")
        console.print(
            f"Vocabulary rules: {len(pack.voice.vocabulary.rules)}, "
            f"forbidden: {len(pack.voice.vocabulary.forbidden)}, "
            f"do-not: {len(pack.voice.do_not)}, "
            f"tests: {len(pack.tests.tests)}"
        )
    except StylePackError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.exceptions.Exit(1)


@cli.command("validate")
@click.argument("text", required=False)
@click.option("-f", "--file", type=click.Path(exists=True), help="Read text from file")
@click.option("-p", "--pack", "pack_name", default=None, help="Style pack to use")
@click.option("-t", "--type", "content_type", type=click.Choice(CONTENT_TYPES), help="Content type")
@click.option("-c", "--component", default=None, help="UI component, e.g. button")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--strict", is_flag=True, help="Fail on any violation")
def validate_cmd(text, file, pack_name, content_type, component, as_json, strict):
    """Validate text against a style pack."""
    try:
        input_text = _read_input(text, file)
        pack = _load(_store(), pack_name or settings.default_pack)
        result = validate(pack, input_text, _context(content_type, component), strict=strict)
    except click.UsageError:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.exceptions.Exit(1)

    if as_json:
        click.echo(_dump(result))
    else:
        for v in result.violations:
            severity_color = {"error": "red", "warning": "yellow"}.get(v.severity, "blue")
            console.print(f"  [{severity_color}]{v.severity.upper()}[/{severity_color}] {v.rule}: {escape(v.message)}")
            if v.text:
                console.print(f"    > {escape(v.text[:120])}")
            if v.suggestion:
                console.print(f"    suggestion: {escape(v.suggestion)}")
        if not result.violations:
            console.print("[green]No violations found.[/green]")
        status = "[green]valid[/green]" if result.valid else "[red]invalid[/red]"
        console.print(
            f"\nScore: {result.score}/100 ({status}): "
            f"{result.summary.errors} errors, {result.summary.warnings} warnings, {result.summary.info} info"
        )

    if not result.valid:
        raise click.exceptions.Exit(1)


@cli.command("rewrite")
@click.argument("text", required=False)
@click.option("-f", "--file", type=click.Path(exists=True), help="Read text from file")
@click.option("-p", "--pack", "pack_name", default=None, help="Style pack to use")
@click.option(
    "-m", "--mode",
    type=click.Choice(["minimal", "normal", "aggressive"]),
    default="normal",
    help="Which severities to fix",
)
@click.option("-t", "--type", "content_type", type=click.Choice(CONTENT_TYPES), help="Content type")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--diff", is_flag=True, help="Show diff format")
@click.option("--changes-only", is_flag=True, help="Only show changes, not full text")
@click.option("--prompt", "show_prompt", is_flag=True, help="Print a prompt for an AI rewrite of what is left")
def rewrite_cmd(text, file, pack_name, mode, content_type, as_json, diff, changes_only, show_prompt):
    """Rewrite text to conform to a style pack."""
    try:
        input_text = _read_input(text, file)
        pack = _load(_store(), pack_name or settings.default_pack)
        context = _context(content_type, None)
        result = rewrite_with_mode(pack, input_text, mode, context)
        remaining = validate(pack, result.rewritten, context) if show_prompt else None
    except click.UsageError:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.exceptions.Exit(1)

    if show_prompt:
        click.echo(build_rewrite_prompt(pack, result.rewritten, remaining.violations, context))
    elif as_json:
        click.echo(_dump(result))
    elif diff:
        click.echo(generate_diff(result))
    elif changes_only:
        click.echo(format_changes(result))
    else:
        console.print("[bold]Rewritten text:[/bold]")
        click.echo(result.rewritten)
        console.print(f"\n[dim]Score: {result.score.before} → {result.score.after}[/dim]")
        console.print(f"[dim]Changes: {len(result.changes)}[/dim]")


@cli.command("test")
@click.option("-p", "--pack", "pack_name", default=None, help="Style pack to test")
@click.option("--filter", "filter_text", default=None, help="Filter tests by id or tag")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def test_cmd(pack_name, filter_text, as_json):
    """Run the test cases shipped with a pack."""
    name = pack_name or settings.default_pack
    try:
        pack = _load(_store(), name)
    except StylePackError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.exceptions.Exit(1)

    report = run_pack_tests(pack, filter_text)

    if as_json:
        click.echo(report.model_dump_json(indent=2, by_alias=True))
    else:
        console.print(f"\n[bold]Running {report.total} tests from pack \"{name}\"...[/bold]\n")
        for outcome in report.results:
            case = outcome.case
            if outcome.passed:
                console.print(f"[green]✓[/green] {case.id}: {case.name} [green]PASS[/green]")
                continue
            console.print(f"[red]✗[/red] {case.id}: {case.name} [red]FAIL[/red]")
            console.print(f"    [dim]Score: {outcome.result.score}, Valid: {outcome.result.valid}[/dim]")
            if outcome.result.violations:
                rules = ", ".join(v.rule for v in outcome.result.violations)
                console.print(f"    [dim]Violations: {rules}[/dim]")
        console.print(
            f"\n[bold]Results:[/bold] [green]{report.passed} passed[/green], "
            f"[red]{report.failed} failed[/red], {report.total} total"
        )

    if report.failed:
        raise click.exceptions.Exit(1)


@cli.command("select-voice")
@click.argument("text", required=False)
@click.option("-f", "--file", type=click.Path(exists=True), help="Read text from file")
@click.option("--channel", default=None, help="Delivery channel, e.g. email or twitter")
@click.option("--subject", default=None, help="Subject line")
@click.option("--content-type", default=None, help="Content type, e.g. blog or article")
@click.option("--preferred-pack", default=None, help="Use this pack if it exists")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def select_voice(text, file, channel, subject, content_type, preferred_pack, as_json):
    """Pick the pack that fits a piece of content."""
    input_text = _read_input(text, file)
    manager = VoiceContextManager(store=_store())
    selection = manager.select_voice(
        input_text,
        {
            "channel": channel,
            "subject": subject,
            "content_type": content_type,
            "preferred_pack": preferred_pack,
        },
    )

    if as_json:
        click.echo(_dump(selection))
        return

    console.print(f"Context: [bold]{selection.context}[/bold]")
    console.print(f"Pack: [bold]{selection.pack_name}[/bold] (confidence {selection.confidence:.1f})")
    console.print(f"[dim]{selection.reason}[/dim]")
    for tip in manager.get_contextual_tips(selection.context):
        console.print(f"  - {tip}")


def main():
    logging.basicConfig(level=settings.log_level.upper())
    cli()


if __name__ == "__main__":
    main()
