"""Click-based CLI entry point for the heater tape control panel."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from heatertape.config import CLOCK_PERIOD_S, DEFAULT_STORE_PATH, EDITABLE_TAPE_FIELDS, POLL_INTERVALS, SIMULATION_PERIOD_S


def _panel(ctx: click.Context):
    """Start (once) and return the session for this invocation."""
    if "panel" not in ctx.obj:
        import numpy as np

        from heatertape.session import ControlPanel
        from heatertape.storage.store import open_store

        store = open_store(ctx.obj["store_path"], ctx.obj["backend"])
        if hasattr(store, "close"):
            ctx.call_on_close(store.close)
        panel = ControlPanel(store, rng=np.random.default_rng(ctx.obj["seed"]))
        panel.start()
        ctx.obj["panel"] = panel
    return ctx.obj["panel"]


def _report(result) -> None:
    if result.applied:
        click.echo("OK")
    else:
        click.echo(f"Rejected: {result.reason}")


@click.group()
@click.version_option(version="0.1.0")
@click.option("--store", "store_path", type=click.Path(path_type=Path), default=str(DEFAULT_STORE_PATH), help="Saved state file.")
@click.option("--backend", type=click.Choice(["json", "duckdb"]), default="json", help="Store backend.")
@click.option("--seed", type=int, default=None, help="Random seed for reproducible simulation.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, store_path: Path, backend: str, seed: int | None, verbose: bool):
    """Heater tape de-icing control panel (simulated)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj.update(store_path=store_path, backend=backend, seed=seed)


@cli.command()
@click.pass_context
def status(ctx: click.Context):
    """Show system metrics and per-tape totals."""
    from heatertape.analysis.metrics import tape_summary

    panel = _panel(ctx)
    click.echo(panel.metrics().summary())
    click.echo("")
    click.echo(tape_summary(panel.system).to_string(index=False))


@cli.command()
@click.option("--tape", "tape_id", type=int, help="Only show segments of this tape.")
@click.pass_context
def tapes(ctx: click.Context, tape_id: int | None):
    """List segments of all tapes."""
    from heatertape.analysis.metrics import segment_table

    df = segment_table(_panel(ctx).system)
    if tape_id is not None:
        df = df[df["tape_id"] == tape_id]
    if df.empty:
        click.echo("No matching segments.")
        return
    click.echo(df.to_string(index=False))


@cli.command("add-tape")
@click.pass_context
def add_tape(ctx: click.Context):
    """Add a tape with four new segments."""
    panel = _panel(ctx)
    _report(panel.add_tape())
    tape = panel.system.tapes[-1]
    click.echo(f"Tape {tape.id}: segments {', '.join(str(s.id) for s in tape.segments)}")


@cli.command("remove-tape")
@click.argument("tape_id", type=int)
@click.pass_context
def remove_tape(ctx: click.Context, tape_id: int):
    """Remove a tape (the last remaining tape is kept)."""
    _report(_panel(ctx).remove_tape(tape_id))


@cli.command("toggle-tape")
@click.argument("tape_id", type=int)
@click.pass_context
def toggle_tape(ctx: click.Context, tape_id: int):
    """Switch a whole tape on or off."""
    _report(_panel(ctx).toggle_tape(tape_id))


@cli.command("set-tape")
@click.argument("tape_id", type=int)
@click.argument("field", type=click.Choice(EDITABLE_TAPE_FIELDS))
@click.argument("value")
@click.pass_context
def set_tape(ctx: click.Context, tape_id: int, field: str, value: str):
    """Edit a tape's name, coordinates, contract number, length or width."""
    _report(_panel(ctx).update_tape_field(tape_id, field, value))


@cli.command("add-segment")
@click.argument("tape_id", type=int)
@click.pass_context
def add_segment(ctx: click.Context, tape_id: int):
    """Append a disabled segment to a tape."""
    _report(_panel(ctx).add_segment(tape_id))


@cli.command("remove-segment")
@click.argument("tape_id", type=int)
@click.argument("segment_id", type=int)
@click.pass_context
def remove_segment(ctx: click.Context, tape_id: int, segment_id: int):
    """Remove a segment (a tape's last segment is kept)."""
    _report(_panel(ctx).remove_segment(tape_id, segment_id))


@cli.command("toggle-segment")
@click.argument("tape_id", type=int)
@click.argument("segment_id", type=int)
@click.pass_context
def toggle_segment(ctx: click.Context, tape_id: int, segment_id: int):
    """Switch one segment on or off."""
    _report(_panel(ctx).toggle_segment(tape_id, segment_id))


@cli.command()
@click.argument("tape_id", type=int)
@click.argument("segment_id", type=int)
@click.argument("power", type=int)
@click.pass_context
def power(ctx: click.Context, tape_id: int, segment_id: int, power: int):
    """Set segment power in percent (clamped to 0-100)."""
    _report(_panel(ctx).set_power(tape_id, segment_id, power))


@cli.command()
@click.argument("tape_id", type=int)
@click.argument("segment_id", type=int)
@click.argument("target", type=int)
@click.pass_context
def target(ctx: click.Context, tape_id: int, segment_id: int, target: int):
    """Set segment target temperature in °C (clamped to -10..30)."""
    _report(_panel(ctx).set_target_temp(tape_id, segment_id, target))


@cli.command("enable-all")
@click.argument("tape_id", type=int)
@click.pass_context
def enable_all(ctx: click.Context, tape_id: int):
    """Enable every segment of a tape."""
    _report(_panel(ctx).set_all_segments(tape_id, True))


@cli.command("disable-all")
@click.argument("tape_id", type=int)
@click.pass_context
def disable_all(ctx: click.Context, tape_id: int):
    """Disable every segment of a tape."""
    _report(_panel(ctx).set_all_segments(tape_id, False))


@cli.command()
@click.option("--pending", is_flag=True, help="Only unacknowledged alerts.")
@click.pass_context
def alerts(ctx: click.Context, pending: bool):
    """List alerts."""
    for a in _panel(ctx).system.alerts:
        if pending and a.acknowledged:
            continue
        mark = " " if a.acknowledged else "*"
        click.echo(f"{mark} [{a.id}] {a.timestamp:%Y-%m-%d %H:%M} {a.severity.value:<8} {a.message}")


@cli.command()
@click.argument("alert_id", type=int)
@click.pass_context
def ack(ctx: click.Context, alert_id: int):
    """Acknowledge an alert."""
    _report(_panel(ctx).acknowledge_alert(alert_id))


@cli.command()
@click.pass_context
def logs(ctx: click.Context):
    """Show this session's event log."""
    for entry in _panel(ctx).logs:
        tag = f" ({entry.segment})" if entry.segment else ""
        click.echo(f"{entry.timestamp:%Y-%m-%d %H:%M:%S} {entry.type.value:<8} {entry.message}{tag}")


@cli.command()
@click.option("--system-on/--system-off", default=None, help="Master switch.")
@click.option("--auto/--manual", "auto_mode", default=None, help="Automatic mode.")
@click.option("--threshold", help="Threshold temperature in °C.")
@click.option("--sound/--no-sound", "alert_sound", default=None, help="Alert sound.")
@click.option("--poll", type=click.Choice(POLL_INTERVALS), help="Poll interval in seconds.")
@click.pass_context
def settings(
    ctx: click.Context,
    system_on: bool | None,
    auto_mode: bool | None,
    threshold: str | None,
    alert_sound: bool | None,
    poll: str | None,
):
    """Show or change panel settings."""
    panel = _panel(ctx)
    changes = {
        "system_on": system_on,
        "auto_mode": auto_mode,
        "threshold_temp": threshold,
        "alert_sound": alert_sound,
        "poll_interval": poll,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if changes:
        _report(panel.update_settings(**changes))
    s = panel.system.settings
    click.echo(f"System on: {s.system_on}")
    click.echo(f"Auto mode: {s.auto_mode}")
    click.echo(f"Threshold: {s.threshold_temp} °C")
    click.echo(f"Alert sound: {s.alert_sound}")
    click.echo(f"Poll interval: {s.poll_interval} s")


@cli.command()
@click.option("--ticks", default=10, show_default=True, help="Number of simulation steps.")
@click.pass_context
def simulate(ctx: click.Context, ticks: int):
    """Fast-forward the temperature simulation."""
    from tqdm import tqdm

    panel = _panel(ctx)
    for _ in tqdm(range(ticks), desc="Simulating"):
        panel.tick()
    click.echo(panel.metrics().summary())


@cli.command()
@click.option("--duration", default=30.0, show_default=True, help="Seconds to run.")
@click.option("--period", default=SIMULATION_PERIOD_S, show_default=True, help="Simulation period in seconds.")
@click.pass_context
def run(ctx: click.Context, duration: float, period: float):
    """Run the simulation in real time, printing metrics after each step."""
    from heatertape.simulation.scheduler import PeriodicScheduler

    panel = _panel(ctx)

    def step():
        panel.tick()
        m = panel.metrics()
        avg = f"{m.average_temperature:.1f}" if m.average_temperature is not None else "n/a"
        click.echo(f"{panel.clock.display()}  active={m.active_segment_count}  avg={avg} °C  power={m.total_power_kw:.1f} kW")

    scheduler = PeriodicScheduler()
    scheduler.every(CLOCK_PERIOD_S, panel.tick_clock, name="clock")
    scheduler.every(period, step, name="simulation")
    scheduler.run(duration)


if __name__ == "__main__":
    cli()
