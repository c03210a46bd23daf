"""Plain-text simulation reports and trajectory CSV exports."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

from rocketlab.model import FlightState, ProjectDocument, Vector3

__all__ = [
    "SimulationSnapshot",
    "ProjectExportSummary",
    "TrajectoryRecord",
    "StructureMassBreakdown",
    "StructuralAssessment",
    "format_report",
    "export_report",
    "format_trajectory_csv",
    "export_trajectory_csv",
]

PathLike = Union[str, "os.PathLike[str]"]

CSV_HEADER = (
    "time_s,pos_x_m,pos_y_m,pos_z_m,vel_x_mps,vel_y_mps,vel_z_mps,"
    "quat_w,quat_x,quat_y,quat_z,omega_x_radps,omega_y_radps,omega_z_radps,mass_kg"
)


@dataclass
class SimulationSnapshot:
    """Instantaneous flight and air-data values at one simulation time."""

    time_s: float = 0.0
    state: FlightState = field(default_factory=FlightState)
    max_altitude_m: float = 0.0
    cg_from_nose_m: float = 0.0
    cp_from_nose_m: float = 0.0
    static_margin_calibers: float = 0.0
    angle_of_attack_deg: float = 0.0
    dynamic_pressure_pa: float = 0.0
    static_pressure_pa: float = 0.0
    total_pressure_pa: float = 0.0
    air_density_kgpm3: float = 0.0
    air_temperature_k: float = 0.0
    speed_of_sound_mps: float = 0.0
    mach_number: float = 0.0
    relative_air_speed_mps: float = 0.0
    wind_speed_mps: float = 0.0
    recommended_max_dynamic_pressure_pa: float = 0.0
    dynamic_pressure_safety_factor: float = 0.0
    shockwave_intensity: float = 0.0
    aeroelastic_response: float = 0.0
    cfd_solver_particle_count: int = 0
    cfd_render_particle_count: int = 0
    parachute_deployed: bool = False


@dataclass
class ProjectExportSummary:
    """Key events of a mission, as recorded by the simulation runtime."""

    mission_time_s: float = 0.0
    max_altitude_m: float = 0.0
    max_range_m: float = 0.0
    trajectory_sample_count: int = 0
    burnout_recorded: bool = False
    burnout_time_s: float = 0.0
    burnout_point_m: Vector3 = field(default_factory=Vector3)
    apogee_recorded: bool = False
    apogee_time_s: float = 0.0
    apogee_point_m: Vector3 = field(default_factory=Vector3)
    impact_recorded: bool = False
    impact_time_s: float = 0.0
    impact_point_m: Vector3 = field(default_factory=Vector3)


@dataclass
class TrajectoryRecord:
    time_s: float = 0.0
    state: FlightState = field(default_factory=FlightState)


@dataclass
class StructureMassBreakdown:
    total_mass_kg: float = 0.0
    nose_mass_kg: float = 0.0
    body_mass_kg: float = 0.0
    transition_mass_kg: float = 0.0
    fin_mass_kg: float = 0.0
    payload_bay_mass_kg: float = 0.0


@dataclass
class StructuralAssessment:
    equivalent_modulus_gpa: float = 0.0
    equivalent_density_kg_per_m3: float = 0.0
    recommended_max_dynamic_pressure_pa: float = 0.0


def _event_lines(name: str, recorded: bool, time_s: float, point: Vector3) -> list[str]:
    lines = [f"{name.capitalize()} recorded: {'yes' if recorded else 'no'}"]
    if recorded:
        lines.append(f"  {name} time: {time_s:.2f} s")
        lines.append(f"  {name} point: ({point.x:.2f}, {point.y:.2f}, {point.z:.2f}) m")
    return lines


def format_report(
    document: ProjectDocument,
    snapshot: SimulationSnapshot,
    summary: ProjectExportSummary,
    structure: StructureMassBreakdown,
    structural: StructuralAssessment,
) -> str:
    """Render the human-readable project report."""
    vehicle = document.vehicle
    geometry = vehicle.geometry
    site = document.launch_site
    weather = document.surface_weather
    position = snapshot.state.position_m

    lines = [
        "# Rocket Lab Report",
        "",
        f"Preset: {document.active_preset.label}",
        f"Body: {geometry.body_length_m:.2f} m x {geometry.body_diameter_m:.3f} m",
        f"Dry mass: {vehicle.dry_mass_kg:.2f} kg",
        f"Reference area: {vehicle.reference_area_m2:.5f} m2",
        f"Motors: {vehicle.cluster.motor_count()}",
        f"Launch site: lat {site.latitude_deg:.4f}, lon {site.longitude_deg:.4f}, "
        f"elev {site.elevation_m:.1f} m",
        f"Weather source: {document.weather_source.label}",
        "",
        f"Surface weather: {weather.temperature_c:.1f} C, {weather.pressure_hpa:.1f} hPa, "
        f"{weather.humidity_percent:.0f}% RH, wind {weather.wind_speed_mps:.1f} m/s @ "
        f"{weather.wind_direction_deg:.0f} deg, gust {weather.wind_gust_mps:.1f} m/s",
        "",
        "## Vehicle Summary",
        "",
        f"Nose shape: {geometry.nose_cone_shape.label}",
        f"Fin shape: {geometry.fin_shape.label}",
        f"Transition shape: {geometry.transition_shape.label}",
        f"Body material: {geometry.body_material.label}",
        f"Nose material: {geometry.nose_material.label}",
        f"Transition material: {geometry.transition_material.label}",
        f"Fin material: {geometry.fin_material.label}",
        f"Payload material: {geometry.payload_material.label}",
        f"Structure mass: {structure.total_mass_kg:.2f} kg",
        f"  nose: {structure.nose_mass_kg:.2f} kg",
        f"  body: {structure.body_mass_kg:.2f} kg",
        f"  transition: {structure.transition_mass_kg:.2f} kg",
        f"  fins: {structure.fin_mass_kg:.2f} kg",
        f"  payload bay: {structure.payload_bay_mass_kg:.2f} kg",
        f"Equivalent modulus: {structural.equivalent_modulus_gpa:.2f} GPa",
        f"Equivalent density: {structural.equivalent_density_kg_per_m3:.1f} kg/m3",
        f"Recommended q max: {structural.recommended_max_dynamic_pressure_pa:.1f} Pa",
        "",
        "## Snapshot",
        "",
        f"Time: {snapshot.time_s:.2f} s",
        f"Altitude: {position.z:.2f} m",
        f"Downrange: {math.sqrt(position.x * position.x + position.y * position.y):.2f} m",
        f"Air speed: {snapshot.relative_air_speed_mps:.2f} m/s",
        f"Mach: {snapshot.mach_number:.3f}",
        f"AoA: {snapshot.angle_of_attack_deg:.3f} deg",
        f"Dynamic pressure: {snapshot.dynamic_pressure_pa:.1f} Pa",
        f"Static pressure: {snapshot.static_pressure_pa:.1f} Pa",
        f"Total pressure: {snapshot.total_pressure_pa:.1f} Pa",
        f"Air density: {snapshot.air_density_kgpm3:.4f} kg/m3",
        f"Air temperature: {snapshot.air_temperature_k:.2f} K",
        f"CG / CP: {snapshot.cg_from_nose_m:.3f} / {snapshot.cp_from_nose_m:.3f} m",
        f"Static margin: {snapshot.static_margin_calibers:.3f} cal",
        f"Recommended q max: {snapshot.recommended_max_dynamic_pressure_pa:.1f} Pa",
        f"Safety factor: {snapshot.dynamic_pressure_safety_factor:.3f}",
        f"Shockwave intensity: {snapshot.shockwave_intensity:.3f}",
        f"Aeroelastic response: {snapshot.aeroelastic_response:.3f}",
        f"CFD solver particles: {snapshot.cfd_solver_particle_count}",
        f"CFD render particles: {snapshot.cfd_render_particle_count}",
        "",
        "## Mission Summary",
        "",
        f"Mission time: {summary.mission_time_s:.2f} s",
        f"Max altitude: {summary.max_altitude_m:.2f} m",
        f"Max range: {summary.max_range_m:.2f} m",
        f"Trajectory samples: {summary.trajectory_sample_count}",
    ]
    lines += _event_lines("burnout", summary.burnout_recorded, summary.burnout_time_s, summary.burnout_point_m)
    lines += _event_lines("apogee", summary.apogee_recorded, summary.apogee_time_s, summary.apogee_point_m)
    lines += _event_lines("impact", summary.impact_recorded, summary.impact_time_s, summary.impact_point_m)
    return "\n".join(lines) + "\n"


def _write_text(path: PathLike, text: str) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(text.encode("utf-8"))


def export_report(
    path: PathLike,
    document: ProjectDocument,
    snapshot: SimulationSnapshot,
    summary: ProjectExportSummary,
    structure: StructureMassBreakdown,
    structural: StructuralAssessment,
) -> None:
    """Write the report to ``path``, creating parent directories as needed."""
    _write_text(path, format_report(document, snapshot, summary, structure, structural))


def _csv_row(record: TrajectoryRecord) -> str:
    state = record.state
    p, v = state.position_m, state.velocity_mps
    q, w = state.attitude_body_to_world, state.angular_velocity_body_radps
    six = [record.time_s, p.x, p.y, p.z, v.x, v.y, v.z]
    nine = [q.w, q.x, q.y, q.z]
    tail = [w.x, w.y, w.z, state.mass_kg]
    fields = [f"{value:.6f}" for value in six]
    fields += [f"{value:.9f}" for value in nine]
    fields += [f"{value:.6f}" for value in tail]
    return ",".join(fields)


def format_trajectory_csv(records: Iterable[TrajectoryRecord]) -> str:
    """Render trajectory samples as CSV with a fixed header line."""
    lines = [CSV_HEADER]
    lines.extend(_csv_row(record) for record in records)
    return "\n".join(lines) + "\n"


def export_trajectory_csv(path: PathLike, records: Iterable[TrajectoryRecord]) -> None:
    """Write trajectory samples as CSV to ``path``, creating parent directories."""
    _write_text(path, format_trajectory_csv(records))