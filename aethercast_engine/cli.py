"""AetherCast CLI - Compile and cast spell scripts.

Usage:
    aethercast compile ./spell.aeth
    aethercast cost ./spell.aeth
    aethercast cast ./first.aeth ./second.aeth --energy 100
    aethercast keywords ./spell.aeth
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

# Load .env early for config/log level selection
load_dotenv()
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from aethercast_core import detect_protocol_keywords
from aethercast_core.utils.logging import setup_logging

from .caster import CompileReport, SpellCaster
from .config import AetherConfig
from .engine import SimulationEngine
from .ledger import ResourceLedger

app = typer.Typer(
    name="aethercast",
    help="AetherCast spell compiler and simulator",
    add_completion=False,
)

console = Console()


def _read_script(file: Path) -> str:
    if not file.exists():
        console.print(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)
    return file.read_text(encoding="utf-8")


def _load_config(config_path: Optional[Path]) -> AetherConfig:
    config = AetherConfig.load(config_path) if config_path else AetherConfig.from_env()
    setup_logging(level=config.log_level, log_dir=config.log_dir)
    return config


def _compile(file: Path) -> CompileReport:
    report = SpellCaster(SimulationEngine(), ResourceLedger()).compile(_read_script(file))
    if not report.success:
        console.print(f"[red]{escape(report.message)}[/red]")
        raise typer.Exit(1)
    return report


def _state_table(engine: SimulationEngine) -> Table:
    state = engine.get_state()
    table = Table(title="Simulation State", border_style="cyan")
    table.add_column("Parameter")
    table.add_column("Value", justify="right")
    table.add_row("Energy", f"{state.energy_level:.1f}")
    table.add_row("Probability", f"{state.probability_shift:.1f}")
    table.add_row("Entropy", f"{state.entropy_level:.1f}")
    table.add_row("Time speed", f"{state.time_speed:.2f}")
    table.add_row("Active effects", str(len(state.active_effects)))
    table.add_row("Last focus", state.last_spell_focus or "-")
    return table


@app.command("compile")
def compile_script(
    file: Annotated[Path, typer.Argument(help="Path to spell script")],
) -> None:
    """Parse a script and show its spells and computed cost."""
    report = _compile(file)

    table = Table(title=f"{file.name}", border_style="blue")
    table.add_column("#", justify="right")
    table.add_column("Focus")
    table.add_column("Anchor")
    table.add_column("Shift", justify="right")
    table.add_column("Declared", justify="right")
    table.add_column("Intent")
    for index, spell in enumerate(report.spells, start=1):
        params = ", ".join(f"{k}:{v}" for k, v in spell.anchor.params.items())
        anchor = f"{spell.anchor.type.value}({params})" if params else spell.anchor.type.value
        table.add_row(
            str(index),
            spell.focus.value,
            anchor,
            f"{spell.shift.direction.value}{spell.shift.amount}%",
            f"{spell.cost}E",
            spell.intent,
        )
    console.print(table)

    protocols = report.spells[0].protocol_keywords
    console.print(Panel(
        f"{escape(report.message)}\n"
        f"[bold]Spells:[/bold] {len(report.spells)}\n"
        f"[bold]Protocols:[/bold] {', '.join(protocols) if protocols else 'none'}",
        title="Spell compiled",
        border_style="green",
    ))


@app.command("cost")
def cost_script(
    file: Annotated[Path, typer.Argument(help="Path to spell script")],
) -> None:
    """Print only the computed energy cost of a script."""
    console.print(str(_compile(file).cost))


@app.command("cast")
def cast_scripts(
    files: Annotated[list[Path], typer.Argument(help="Spell scripts, cast in order")],
    energy: Annotated[Optional[float], typer.Option("--energy", "-e", help="Starting caster energy")] = None,
    config_path: Annotated[Optional[Path], typer.Option("--config", "-c", help="JSON config file")] = None,
) -> None:
    """Cast one or more scripts in a single session."""
    config = _load_config(config_path)
    engine = SimulationEngine(config.simulation)
    ledger = ResourceLedger(config.ledger)
    if energy is not None:
        ledger.energy = energy
    caster = SpellCaster(engine, ledger)

    failed = False
    for file in files:
        report = caster.cast(_read_script(file))
        if report.success:
            style, title = "green", f"{file.name}: cast"
        else:
            style, title = "red", f"{file.name}: failed"
            failed = True
        body = report.message
        if report.feedback:
            body += f"\n[bold]Feedback:[/bold] {report.feedback.value}"
        if report.cost is not None:
            body += f"\n[bold]Cost:[/bold] {report.cost}E"
        body += f"\n[bold]Energy remaining:[/bold] {report.energy_remaining:.0f}E"
        console.print(Panel(body, title=title, border_style=style))

    console.print(_state_table(engine))
    if failed:
        raise typer.Exit(1)


@app.command("keywords")
def show_keywords(
    file: Annotated[Path, typer.Argument(help="Path to spell script")],
) -> None:
    """List privileged protocol keywords found in a script."""
    found = detect_protocol_keywords(_read_script(file))
    if not found:
        console.print("No hidden protocols detected.")
        return
    for keyword in found:
        console.print(f"  • {keyword}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
