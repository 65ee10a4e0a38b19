"""
CLI view formatters using Rich for pretty console output.

Handles display of estimates, calibrations and model tables.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import EstimateResult, LiftType, ModelTables

console = Console()


def print_result(result: EstimateResult) -> None:
    """
    Print an estimate with its range and calculation details.

    Args:
        result: Output of OneRepMaxEngine.estimate_1rm
    """
    d = result.details
    lower, upper = result.confidence_range

    console.print()
    console.print(f"[bold cyan]1RM Estimate — {d.lift_type.display_name.title()}[/bold cyan]")
    console.print(f"  [bold]{result.estimated_1rm:g} kg[/bold]")
    console.print(f"  Range:       {lower:g} – {upper:g} kg")
    console.print(f"  Confidence:  ±{result.confidence_percentage:g}%")
    console.print()

    table = Table(title="Calculation Details", show_header=True, header_style="dim")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", justify="right")

    k_label = "k Value (calibrated)" if d.k_source == "calibrated" else "k Value"
    table.add_row("Weight", f"{d.weight:g} kg")
    table.add_row("Reps", str(d.reps))
    table.add_row("RIR", str(d.rir))
    table.add_row("Effective Reps", str(d.effective_reps))
    table.add_row(k_label, f"{d.k:.6f}")
    table.add_row("Endurance Factor", f"{d.endurance_factor:g}")
    table.add_row("CNS Multiplier", f"{d.cns_multiplier:.3f}")
    table.add_row("Velocity Multiplier", f"{d.velocity_multiplier:.3f}")
    table.add_row("Exponent", f"{d.exponent:.6f}")
    console.print(table)

    for w in result.warnings:
        print_warning(w)
    console.print()


def print_calibration(lift: LiftType, k: float, default_k: float) -> None:
    """Print a freshly derived k next to the default it replaces."""
    console.print()
    print_success(f"Calibrated k value for {lift.display_name}: {k:.6f}")
    console.print(f"  Default was {default_k:.6f}. This value is used for the rest of the session.")
    console.print()


def print_tables(tables: ModelTables, calibrated: dict[LiftType, float] | None = None) -> None:
    """
    Print the active model tables.

    Args:
        tables: Model tables in use
        calibrated: Calibrated k per lift, shown alongside the defaults
    """
    calibrated = calibrated or {}

    lifts = Table(title="Lifts", show_header=True, header_style="dim")
    lifts.add_column("Lift", style="cyan")
    lifts.add_column("k (default)", justify="right")
    lifts.add_column("k (calibrated)", justify="right", style="bold")
    lifts.add_column("Rep limit", justify="right")
    for lift, k in tables.lift_constants.items():
        cal = calibrated.get(lift)
        lifts.add_row(
            lift.value,
            f"{k:.3f}",
            f"{cal:.6f}" if cal is not None else "-",
            str(tables.rep_limits[lift]),
        )

    endurance = Table(title="Endurance Factors", show_header=True, header_style="dim")
    endurance.add_column("Profile", style="cyan")
    endurance.add_column("E", justify="right")
    for profile, e in tables.endurance_factors.items():
        endurance.add_row(profile.value, f"{e:g}")

    velocity = Table(title="Velocity Multipliers", show_header=True, header_style="dim")
    velocity.add_column("Rep speed", style="cyan")
    velocity.add_column("V", justify="right")
    for speed, v in tables.velocity_multipliers.items():
        velocity.add_row(speed.value, f"{v:.2f}")

    console.print()
    console.print(lifts)
    console.print(endurance)
    console.print(velocity)
    console.print()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
