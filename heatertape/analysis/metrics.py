"""System-wide derived metrics, recomputed from the snapshot on every call."""

from __future__ import annotations

import re
from dataclasses import dataclass

import pandas as pd

from heatertape.config import HEATING_CONDUCTORS, HEATING_W_PER_M, SEGMENT_POWER_KW, SUPPLY_VOLTAGE_V
from heatertape.models.core import Segment, System

_NUMBER_RE = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def parse_number(text: str) -> float:
    """Leading numeric value of a free-text field, e.g. "24 m" -> 24.0; otherwise 0."""
    match = _NUMBER_RE.match(str(text))
    return float(match.group(1)) if match else 0.0


def effective_segments(system: System) -> list[Segment]:
    return [s for tape, s in system.iter_segments() if tape.is_effective(s)]


def active_segment_count(system: System) -> int:
    return len(effective_segments(system))


def average_temperature(system: System) -> float | None:
    """Mean temperature of active segments, or None if none are active."""
    active = effective_segments(system)
    if not active:
        return None
    return sum(s.temperature_c for s in active) / len(active)


def total_power_kw(system: System) -> float:
    return sum((s.power / 100) * SEGMENT_POWER_KW for s in effective_segments(system))


def total_length_meters(system: System) -> float:
    return sum(parse_number(t.length) for t in system.tapes)


def active_tape_count(system: System) -> int:
    return sum(1 for t in system.tapes if t.enabled)


def total_sensor_count(system: System) -> int:
    return sum(s.sensor_count for _, s in system.iter_segments())


def unacknowledged_alert_count(system: System) -> int:
    return sum(1 for a in system.alerts if not a.acknowledged)


@dataclass(frozen=True)
class SystemMetrics:
    active_segment_count: int
    average_temperature: float | None
    total_power_kw: float
    total_length_meters: float
    active_tape_count: int
    total_sensor_count: int
    unacknowledged_alert_count: int

    def summary(self) -> str:
        avg = f"{self.average_temperature:.1f} °C" if self.average_temperature is not None else "n/a"
        return "\n".join([
            f"Active segments: {self.active_segment_count}",
            f"Average temperature: {avg}",
            f"Total power: {self.total_power_kw:.1f} kW",
            f"Total length: {self.total_length_meters:g} m",
            f"Active tapes: {self.active_tape_count}",
            f"Sensors: {self.total_sensor_count}",
            f"Unacknowledged alerts: {self.unacknowledged_alert_count}",
        ])


def compute_metrics(system: System) -> SystemMetrics:
    return SystemMetrics(
        active_segment_count=active_segment_count(system),
        average_temperature=average_temperature(system),
        total_power_kw=total_power_kw(system),
        total_length_meters=total_length_meters(system),
        active_tape_count=active_tape_count(system),
        total_sensor_count=total_sensor_count(system),
        unacknowledged_alert_count=unacknowledged_alert_count(system),
    )


def segment_table(system: System) -> pd.DataFrame:
    """One row per segment, with the owning tape and effective state.

    Electrical columns (W/m, A, ohm) are NaN for segments that are not
    heating: inactive or at 0% power.
    """
    rows = []
    for tape, s in system.iter_segments():
        temps = [sensor.temperature_c for sensor in s.sensors]
        rows.append({
            "tape_id": tape.id,
            "segment_id": s.id,
            "name": s.name,
            "enabled": s.enabled,
            "active": tape.is_effective(s),
            "status": s.status.value,
            "power": s.power,
            "temperature_c": s.temperature_c,
            "target_temp_c": s.target_temp_c,
            "sensor_count": s.sensor_count,
            "sensor_min_c": min(temps),
            "sensor_max_c": max(temps),
        })
    df = pd.DataFrame(rows)
    if df.empty:
        return df

    heating = df["active"] & (df["power"] > 0)
    density = (df["power"] / 100 * HEATING_W_PER_M).where(heating)
    df["power_density_w_per_m"] = density
    df["current_a"] = density * HEATING_CONDUCTORS / SUPPLY_VOLTAGE_V
    df["resistance_ohm"] = SUPPLY_VOLTAGE_V**2 / (density * HEATING_CONDUCTORS)
    return df


def tape_summary(system: System) -> pd.DataFrame:
    """Per-tape totals: segments, active segments, power and mean active temperature."""
    df = segment_table(system)
    if df.empty:
        return pd.DataFrame()

    df["power_kw"] = df["power"] / 100 * SEGMENT_POWER_KW * df["active"]
    df["active_temp_c"] = df["temperature_c"].where(df["active"])
    summary = (
        df.groupby("tape_id")
        .agg(
            segments=("segment_id", "count"),
            active_segments=("active", "sum"),
            sensors=("sensor_count", "sum"),
            power_kw=("power_kw", "sum"),
            avg_temp_c=("active_temp_c", "mean"),
        )
        .reset_index()
    )
    tapes = pd.DataFrame([
        {"tape_id": t.id, "name": t.name, "enabled": t.enabled, "length_m": parse_number(t.length)}
        for t in system.tapes
    ])
    return tapes.merge(summary, on="tape_id", how="left")
