"""
Resus: terminal front end for the protocol clock and training simulator.

Commands:
- resus doses      - Weight-based drug doses and shock energies
- resus scenarios  - List training scenarios
- resus causes     - Reversible causes checklist (Hs and Ts)
- resus simulate   - Interactive training scenario with scoring
- resus live       - Live arrest clock with voice-style cues
"""
from __future__ import annotations

import asyncio
import math
import random
import sys
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from config import Settings, get_settings
from resus.clock import TickSource
from resus.protocol import (
    CAUSE_GUIDANCE,
    ConsoleAnnouncer,
    InvalidSessionError,
    NullAnnouncer,
    Phase,
    ProtocolEngine,
    QueueAnnouncer,
    ReversibleCause,
    Rhythm,
    amiodarone_dose_mg,
    build_debrief,
    epinephrine_dose_mg,
    format_clock,
    shock_energy_j_per_kg,
    shock_energy_joules,
)
from resus.simulation import (
    PerformanceMetrics,
    TrainingSimulator,
    get_all_scenarios,
    get_scenario,
    random_scenario,
)

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="resus",
    help="Resus: pediatric cardiac arrest clock and training simulator",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

PHASE_STYLES = {
    Phase.COMPRESSIONS: ("COMPRESSIONS", "bold blue"),
    Phase.RHYTHM_CHECK: ("RHYTHM CHECK", "bold yellow"),
    Phase.SHOCK: ("SHOCK", "bold red"),
    Phase.DRUG: ("DRUG", "bold green"),
}


def style_rhythm(rhythm: Rhythm | None) -> str:
    if rhythm is None:
        return "[dim]not assessed[/dim]"
    if rhythm == Rhythm.ROSC:
        return "[bold green]ROSC[/bold green]"
    color = "red" if rhythm.is_shockable else "yellow"
    return f"[{color}]{rhythm.value}[/{color}]"


# =============================================================================
# Display Helpers
# =============================================================================


def display_live_status(engine: ProtocolEngine) -> None:
    snap = engine.snapshot()
    label, style = PHASE_STYLES[snap.phase]
    if snap.phase == Phase.DRUG and snap.due_drug is not None:
        label = snap.due_drug.value.upper()

    content = Text()
    content.append(f"{snap.clock}  ", style="bold")
    content.append(label, style=style)
    content.append(f"\nNext rhythm check: {format_clock(snap.seconds_to_rhythm_check)}")
    content.append(f"   Next epi: {format_clock(snap.seconds_to_next_epi)}")
    content.append(f"\nShocks: {snap.shock_count}   Epi doses: {snap.epi_doses}")
    content.append(f"   Amiodarone: {'given' if snap.amiodarone_given else 'not given'}")
    console.print(Panel(content, border_style="cyan"))

    for event in engine.recent_events(3):
        details = f" - {event.details}" if event.details else ""
        console.print(f"  [dim]{format_clock(event.timestamp_seconds)}[/dim] {event.action}{details}")


def display_metrics(metrics: PerformanceMetrics) -> None:
    table = Table(title="Performance")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Time to CPR", f"{metrics.time_to_first_compression}s")
    table.add_row("Time to first shock", f"{metrics.time_to_first_shock}s")
    table.add_row("Time to first epinephrine", f"{metrics.time_to_first_epinephrine}s")
    table.add_row("Shocks delivered", str(metrics.shocks_delivered))
    table.add_row("Epinephrine doses", str(metrics.epi_doses_given))
    table.add_row("Causes identified", str(metrics.complications_identified))
    table.add_row("Guideline adherence", f"{metrics.guideline_adherence}%")
    table.add_row("Overall score", f"[bold]{metrics.overall_score}[/bold]")
    console.print(table)
    console.print(Panel("\n".join(metrics.feedback), title="[bold]Feedback[/bold]", border_style="blue"))


# =============================================================================
# Commands
# =============================================================================


@app.command()
def doses(
    weight: float = typer.Option(..., "--weight", "-w", help="Patient weight in kg"),
    shocks: int = typer.Option(5, help="How many shock energies to list"),
) -> None:
    """Show weight-based doses."""
    if not math.isfinite(weight) or weight <= 0:
        console.print("[red]Weight must be positive[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Doses for {weight:g} kg")
    table.add_column("Item")
    table.add_column("Dose", justify="right")
    table.add_row("Epinephrine (0.01 mg/kg)", f"{epinephrine_dose_mg(weight):g} mg")
    table.add_row("Amiodarone (5 mg/kg, max 300)", f"{amiodarone_dose_mg(weight):g} mg")
    for n in range(1, shocks + 1):
        table.add_row(
            f"Shock {n}",
            f"{shock_energy_j_per_kg(n)} J/kg ({shock_energy_joules(n, weight):g} J)",
        )
    console.print(table)


@app.command()
def scenarios() -> None:
    """List training scenarios."""
    table = Table(title="Training Scenarios")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Rhythm")
    table.add_column("Age")
    table.add_column("Weight", justify="right")
    table.add_column("Complications")
    for scenario in get_all_scenarios():
        table.add_row(
            scenario.id,
            scenario.name,
            style_rhythm(scenario.initial_rhythm),
            scenario.age_display,
            f"{scenario.weight:g} kg",
            ", ".join(c.readable for c in scenario.complications) or "-",
        )
    console.print(table)


@app.command()
def causes() -> None:
    """Show the reversible causes checklist."""
    table = Table(title="Reversible Causes")
    table.add_column("", style="bold")
    table.add_column("Cause")
    table.add_column("Action")
    for info in CAUSE_GUIDANCE.values():
        table.add_row(info.group, info.label, info.treatment)
    console.print(table)


SIM_ACTIONS = {
    "1": "Start CPR",
    "2": "Attach defibrillator",
    "3": "Assess rhythm",
    "4": "Deliver shock",
    "5": "Give epinephrine",
    "6": "Give amiodarone",
    "7": "Treat reversible cause",
    "8": "Continue CPR (wait)",
    "q": "End simulation",
}


@app.command()
def simulate(
    scenario_id: Optional[str] = typer.Option(
        None, "--scenario", "-s", help="Scenario id (random if omitted)"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible runs"),
    hints: Optional[bool] = typer.Option(None, "--hints/--no-hints", help="Show hints"),
) -> None:
    """Run an interactive training scenario."""
    settings = get_settings()
    rng = random.Random(seed)

    try:
        scenario = get_scenario(scenario_id) if scenario_id else random_scenario(rng)
    except InvalidSessionError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    show_hints = settings.sim_hints_enabled if hints is None else hints
    sim = TrainingSimulator(
        scenario,
        rng,
        clock=TickSource(settings.tick_interval_seconds),
        config=settings.simulation_config(),
    )

    console.print(Panel(
        f"{scenario.backstory}\n\nAge {scenario.age_display}, {scenario.weight:g} kg",
        title=f"[bold cyan]{scenario.name}[/bold cyan]",
        border_style="cyan",
    ))
    sim.start()

    while not sim.is_over:
        state = sim.state
        console.print(
            f"\n[bold]{format_clock(state.elapsed_seconds)}[/bold]  "
            f"Shocks {state.shock_count}  Epi {state.epi_doses}"
        )
        if show_hints and (hint := sim.hint()):
            console.print(f"[yellow]{hint}[/yellow]")
        for key, label in SIM_ACTIONS.items():
            console.print(f"  [cyan]{key}[/cyan] {label}")

        choice = Prompt.ask("Action", choices=list(SIM_ACTIONS), default="8")
        if choice == "q":
            break
        if choice == "1":
            sim.start_cpr()
        elif choice == "2":
            sim.attach_defibrillator()
        elif choice == "3":
            rhythm = sim.assess_rhythm()
            console.print(f"Monitor shows: {style_rhythm(rhythm)}")
        elif choice == "4":
            if not sim.deliver_shock():
                console.print("[red]Attach the defibrillator first[/red]")
        elif choice == "5":
            sim.give_epinephrine()
        elif choice == "6":
            if not sim.give_amiodarone():
                console.print("[red]Amiodarone already given[/red]")
        elif choice == "7":
            cause = Prompt.ask("Cause", choices=[c.value for c in ReversibleCause])
            sim.treat_complication(cause)

        sim.advance(settings.sim_action_seconds)

    if sim.state.rosc_achieved:
        console.print("\n[bold green]ROSC ACHIEVED[/bold green]")
    display_metrics(sim.finish())


LIVE_HELP = (
    "[cyan]c[/cyan] rhythm check  [cyan]vf[/cyan]/[cyan]pvt[/cyan] shockable  "
    "[cyan]pea[/cyan]/[cyan]asystole[/cyan] non-shockable  [cyan]s[/cyan] shock  "
    "[cyan]d[/cyan] give drug  [cyan]r[/cyan] ROSC  [cyan]p[/cyan] pause/resume  "
    "[cyan]q[/cyan] quit"
)


async def _run_live(engine: ProtocolEngine, queue: QueueAnnouncer | None) -> None:
    clock_task = asyncio.create_task(engine.clock.run())
    drain_task = (
        asyncio.create_task(queue.drain(ConsoleAnnouncer(console))) if queue else None
    )
    engine.start()
    console.print(LIVE_HELP)

    try:
        while not engine.session.rosc_achieved:
            command = (await asyncio.to_thread(console.input, "> ")).strip().lower()
            if command in ("q", "quit"):
                break
            if command == "c":
                engine.initiate_rhythm_check()
            elif command in ("vf", "pvt", "pea", "asystole"):
                rhythm = {"vf": Rhythm.VF, "pvt": Rhythm.PVT, "pea": Rhythm.PEA}.get(
                    command, Rhythm.ASYSTOLE
                )
                if not engine.classify_rhythm(rhythm):
                    console.print("[red]Start a rhythm check first[/red]")
            elif command == "s":
                if not engine.deliver_shock():
                    console.print("[red]No shock indicated right now[/red]")
            elif command == "d":
                if not engine.give_drug():
                    console.print("[red]No drug due right now[/red]")
            elif command == "r":
                engine.achieve_rosc()
            elif command == "p":
                if not engine.pause():
                    engine.resume()
            elif command:
                console.print(LIVE_HELP)
            display_live_status(engine)
    finally:
        engine.teardown()
        await clock_task
        if drain_task:
            await asyncio.sleep(0)
            drain_task.cancel()


@app.command()
def live(
    weight: float = typer.Option(..., "--weight", "-w", help="Patient weight in kg"),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress spoken cues"),
) -> None:
    """Run the live arrest clock."""
    settings = get_settings()
    try:
        queue = None if quiet or not settings.announcer_enabled else QueueAnnouncer()
        engine = ProtocolEngine(
            weight,
            announcer=queue or NullAnnouncer(),
            clock=TickSource(settings.tick_interval_seconds),
            timings=settings.protocol_timings(),
            event_display_limit=settings.event_display_limit,
        )
    except InvalidSessionError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    asyncio.run(_run_live(engine, queue))

    report = build_debrief(engine.session)
    lines = [
        f"Outcome: {report.outcome}",
        f"Duration: {format_clock(report.total_duration_seconds)}",
        f"Compression fraction: {report.compression_fraction:.0f}%",
        f"Shocks: {report.shock_count}   Epi doses: {report.epi_doses}",
    ]
    lines += [f"[red]Delay:[/red] {d}" for d in report.critical_delays]
    lines += [f"[green]Strength:[/green] {s}" for s in report.strengths]
    console.print(Panel("\n".join(lines), title="[bold]Debrief[/bold]", border_style="green"))


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
