"""Reading and writing ``.rlab`` project files.

A project file starts with the line ``rocket_lab_project``, followed by
INI-like ``[section]`` blocks of ``key=value`` lines. Keys inside a section
are addressed as ``section.key``. Blank lines and lines starting with ``#``
are ignored. Keys that are absent keep their default values on load.
"""

from __future__ import annotations

import math
import os
import re
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from rocketlab.model import (
    ComponentMaterial,
    ComponentTopologyOverride,
    ComponentType,
    ComponentVertexModifiers,
    FinShape,
    FreeControlVertex,
    LaunchSite,
    MotorCluster,
    MotorSettings,
    MountedMotor,
    NoseConeShape,
    ProjectDocument,
    RecoverySystem,
    RocketPreset,
    SurfaceWeather,
    TransitionShape,
    Vector3,
    VehicleGeometry,
    WeatherDataSource,
    component_key,
    parse_label,
)

__all__ = [
    "ProjectFormatError",
    "dumps_project",
    "loads_project",
    "save_project",
    "load_project",
]

HEADER = "rocket_lab_project"
FORMAT_VERSION = 1

_WHITESPACE = " \t\r\n"
_INT32_MIN, _INT32_MAX = -(2**31), 2**31 - 1
_UINT32_MAX = 2**32 - 1

_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_HEX = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?\d+)?")
_INFINITY = re.compile(r"[+-]?inf(?:inity)?", re.IGNORECASE)
_NAN = re.compile(r"[+-]?nan(?:\([0-9A-Za-z_]*\))?", re.IGNORECASE)
_SIGNED_INT = re.compile(r"-?\d+")
_UNSIGNED_INT = re.compile(r"\d+")


class ProjectFormatError(ValueError):
    """Raised when a project file's content cannot be understood."""


class _Unsigned:
    """Marker kind for non-negative 32-bit integers."""


PathLike = Union[str, "os.PathLike[str]"]


def _trim(text: str) -> str:
    return text.strip(_WHITESPACE)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return str(value.label)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


def _parse_float(text: str) -> Optional[float]:
    candidate = text.lstrip(" \t\n\v\f\r")
    if _DECIMAL.fullmatch(candidate):
        return float(candidate)
    if _HEX.fullmatch(candidate):
        return float.fromhex(candidate)
    if _INFINITY.fullmatch(candidate):
        return float(candidate)
    if _NAN.fullmatch(candidate):
        return -math.nan if candidate.startswith("-") else math.nan
    return None


def _parse_int(text: str, unsigned: bool) -> Optional[int]:
    pattern = _UNSIGNED_INT if unsigned else _SIGNED_INT
    if not pattern.fullmatch(text):
        return None
    value = int(text)
    low, high = (0, _UINT32_MAX) if unsigned else (_INT32_MIN, _INT32_MAX)
    if not low <= value <= high:
        return None
    return value


def _parse_bool(text: str) -> Optional[bool]:
    if text in ("1", "true", "True"):
        return True
    if text in ("0", "false", "False"):
        return False
    return None


def _convert(raw: str, kind: Any, key: str, enum_message: str = "") -> Any:
    if kind is bool:
        parsed = _parse_bool(raw)
        if parsed is None:
            raise ProjectFormatError(f"Invalid bool value for key '{key}'.")
        return parsed
    if kind is float or kind is int or kind is _Unsigned:
        if kind is float:
            parsed = _parse_float(raw)
        else:
            parsed = _parse_int(raw, unsigned=kind is _Unsigned)
        if parsed is None:
            raise ProjectFormatError(f"Invalid numeric value for key '{key}'.")
        return parsed
    try:
        return parse_label(kind, raw)
    except ValueError:
        raise ProjectFormatError(enum_message) from None


def _parse_sections(body: str) -> dict[str, str]:
    values: dict[str, str] = {}
    section = ""
    for line in body.split("\n"):
        trimmed = _trim(line)
        if not trimmed or trimmed.startswith("#"):
            continue
        if trimmed[0] == "[" and trimmed[-1] == "]":
            section = _trim(trimmed[1:-1])
            continue
        key, separator, value = trimmed.partition("=")
        if not separator:
            continue
        key = _trim(key)
        if section:
            key = f"{section}.{key}"
        values[key] = _trim(value)
    return values


class _Reader:
    """Typed access to the flat key/value map of a parsed project file."""

    def __init__(self, values: dict[str, str]) -> None:
        self._values = values

    def value(self, key: str, kind: Any, default: Any, enum_message: str = "") -> Any:
        raw = self._values.get(key)
        if raw is None:
            return default
        return _convert(raw, kind, key, enum_message)

    def choice(self, section: str, name: str, kind: Any, default: Any) -> Any:
        return self.value(f"{section}.{name}", kind, default, f"Invalid {name}.")

    def vector(self, prefix: str, default: Vector3) -> Vector3:
        return replace(
            default,
            x=self.value(f"{prefix}.x", float, default.x),
            y=self.value(f"{prefix}.y", float, default.y),
            z=self.value(f"{prefix}.z", float, default.z),
        )

    def count(self, key: str) -> int:
        return max(self.value(key, int, 0), 0)


class _Writer:
    def __init__(self) -> None:
        self.lines: list[str] = [HEADER, f"format_version={FORMAT_VERSION}"]

    def section(self, name: str) -> None:
        self.lines.extend(["", f"[{name}]"])

    def put(self, key: str, value: Any) -> None:
        self.lines.append(f"{key}={_format_value(value)}")

    def vector(self, prefix: str, value: Vector3) -> None:
        self.put(f"{prefix}.x", value.x)
        self.put(f"{prefix}.y", value.y)
        self.put(f"{prefix}.z", value.z)

    def items(self, pairs: list[tuple[str, Any]]) -> None:
        for key, value in pairs:
            self.put(key, value)

    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


def _geometry_items(g: VehicleGeometry) -> list[tuple[str, Any]]:
    return [
        ("body_length_m", g.body_length_m),
        ("body_diameter_m", g.body_diameter_m),
        ("wall_thickness_m", g.wall_thickness_m),
        ("nose_length_m", g.nose_length_m),
        ("nose_cone_shape", g.nose_cone_shape),
        ("nose_material", g.nose_material),
        ("transition_length_m", g.transition_length_m),
        ("transition_aft_diameter_m", g.transition_aft_diameter_m),
        ("transition_shape", g.transition_shape),
        ("transition_material", g.transition_material),
        ("body_material", g.body_material),
        ("fin_front_from_nose_m", g.fin_front_from_nose_m),
        ("fin_root_chord_m", g.fin_root_chord_m),
        ("fin_tip_chord_m", g.fin_tip_chord_m),
        ("fin_span_m", g.fin_span_m),
        ("fin_sweep_length_m", g.fin_sweep_length_m),
        ("fin_thickness_m", g.fin_thickness_m),
        ("fin_shape", g.fin_shape),
        ("fin_material", g.fin_material),
        ("fin_count", g.fin_count),
        ("payload_length_m", g.payload_length_m),
        ("payload_mass_kg", g.payload_mass_kg),
        ("payload_material", g.payload_material),
        ("nose_mid_radius_scale", g.nose_controls.mid_radius_scale),
        ("nose_shoulder_radius_scale", g.nose_controls.shoulder_radius_scale),
        ("body_fore_radius_scale", g.body_controls.fore_radius_scale),
        ("body_mid_radius_scale", g.body_controls.mid_radius_scale),
        ("body_aft_radius_scale", g.body_controls.aft_radius_scale),
        ("transition_mid_radius_scale", g.transition_controls.mid_radius_scale),
        ("fin_tip_le_offset_m", g.fin_controls.tip_le_offset_m),
        ("fin_tip_te_offset_m", g.fin_controls.tip_te_offset_m),
        ("fin_span_scale", g.fin_controls.span_scale),
        ("fin_thickness_scale", g.fin_controls.thickness_scale),
        ("structure_cg_from_nose_m", g.structure_cg_from_nose_m),
        ("propellant_cg_from_nose_m", g.propellant_cg_from_nose_m),
    ]


def _recovery_items(r: RecoverySystem) -> list[tuple[str, Any]]:
    return [
        ("parachute_drag_coefficient", r.parachute_drag_coefficient),
        ("parachute_area_m2", r.parachute_area_m2),
        ("deployment_altitude_m", r.deployment_altitude_m),
        ("deployment_delay_s", r.deployment_delay_s),
    ]


def _launch_site_items(s: LaunchSite) -> list[tuple[str, Any]]:
    return [
        ("latitude_deg", s.latitude_deg),
        ("longitude_deg", s.longitude_deg),
        ("elevation_m", s.elevation_m),
    ]


def _surface_weather_items(w: SurfaceWeather) -> list[tuple[str, Any]]:
    return [
        ("pressure_hpa", w.pressure_hpa),
        ("temperature_c", w.temperature_c),
        ("humidity_percent", w.humidity_percent),
        ("wind_speed_mps", w.wind_speed_mps),
        ("wind_direction_deg", w.wind_direction_deg),
        ("wind_gust_mps", w.wind_gust_mps),
    ]


def _motor_settings_items(m: MotorSettings) -> list[tuple[str, Any]]:
    return [
        ("motor_count", m.motor_count),
        ("max_thrust_n", m.max_thrust_n),
        ("burn_time_s", m.burn_time_s),
        ("propellant_mass_kg", m.propellant_mass_kg),
        ("mount_radius_m", m.mount_radius_m),
        ("cant_angle_deg", m.cant_angle_deg),
    ]


def _write_cluster(writer: _Writer, cluster: MotorCluster) -> None:
    writer.section("cluster")
    writer.put("count", cluster.motor_count())
    for index, mounted in enumerate(cluster.motors):
        prefix = f"motor{index}"
        writer.put(f"{prefix}.max_thrust_n", mounted.motor.max_thrust_n)
        writer.put(f"{prefix}.burn_time_s", mounted.motor.burn_time_s)
        writer.put(f"{prefix}.propellant_mass_kg", mounted.motor.propellant_mass_kg)
        writer.vector(f"{prefix}.mount_position_m", mounted.mount_position_m)
        writer.vector(f"{prefix}.thrust_direction_body", mounted.thrust_direction_body)
        writer.put(f"{prefix}.failed", mounted.failed)


def _write_modifiers(writer: _Writer, name: str, modifiers: ComponentVertexModifiers) -> None:
    writer.section(f"modifier.{name}")
    writer.put("active", modifiers.is_active)
    writer.put("count", len(modifiers.modified_vertices))
    for index, vertex in enumerate(modifiers.modified_vertices):
        prefix = f"vertex{index}"
        writer.put(f"{prefix}.id", vertex.vertex_id)
        writer.vector(f"{prefix}.base", vertex.base_position_m)
        writer.vector(f"{prefix}.offset", vertex.offset_m)
        writer.put(f"{prefix}.influence_radius_m", vertex.influence_radius_m)
        writer.put(f"{prefix}.locked", vertex.locked)


def _write_topology(writer: _Writer, name: str, topology: ComponentTopologyOverride) -> None:
    writer.section(f"topology.{name}")
    writer.put("active", topology.is_active)
    writer.put("vertex_count", len(topology.vertex_positions_body_m))
    writer.put("index_count", len(topology.indices))
    for index, position in enumerate(topology.vertex_positions_body_m):
        writer.vector(f"vertex{index}", position)
    for index, triangle_index in enumerate(topology.indices):
        writer.put(f"index{index}", int(triangle_index))


def dumps_project(document: ProjectDocument) -> str:
    """Serialise ``document`` to the text of a ``.rlab`` project file."""
    writer = _Writer()

    writer.section("project")
    writer.put("active_preset", document.active_preset)

    geometry = document.vehicle.geometry
    writer.section("geometry")
    writer.items(_geometry_items(geometry))

    writer.section("recovery")
    writer.items(_recovery_items(document.vehicle.recovery_system))

    writer.section("launch_site")
    writer.items(_launch_site_items(document.launch_site))

    writer.section("surface_weather")
    writer.items(_surface_weather_items(document.surface_weather))

    writer.section("weather")
    writer.put("source", document.weather_source)

    writer.section("motor_editor")
    writer.items(_motor_settings_items(document.motor_settings))

    _write_cluster(writer, document.vehicle.cluster)

    for component in ComponentType:
        name = component_key(component)
        _write_modifiers(writer, name, geometry.vertex_modifiers(component))
        _write_topology(writer, name, geometry.topology_override(component))

    return writer.text()


def _read_geometry(reader: _Reader, g: VehicleGeometry) -> None:
    def number(name: str, current: float) -> float:
        return reader.value(f"geometry.{name}", float, current)

    g.body_length_m = number("body_length_m", g.body_length_m)
    g.body_diameter_m = number("body_diameter_m", g.body_diameter_m)
    g.wall_thickness_m = number("wall_thickness_m", g.wall_thickness_m)
    g.nose_length_m = number("nose_length_m", g.nose_length_m)
    g.transition_length_m = number("transition_length_m", g.transition_length_m)
    g.transition_aft_diameter_m = number("transition_aft_diameter_m", g.transition_aft_diameter_m)
    g.fin_front_from_nose_m = number("fin_front_from_nose_m", g.fin_front_from_nose_m)
    g.fin_root_chord_m = number("fin_root_chord_m", g.fin_root_chord_m)
    g.fin_tip_chord_m = number("fin_tip_chord_m", g.fin_tip_chord_m)
    g.fin_span_m = number("fin_span_m", g.fin_span_m)
    g.fin_sweep_length_m = number("fin_sweep_length_m", g.fin_sweep_length_m)
    g.fin_thickness_m = number("fin_thickness_m", g.fin_thickness_m)
    g.fin_count = reader.value("geometry.fin_count", int, g.fin_count)
    g.payload_length_m = number("payload_length_m", g.payload_length_m)
    g.payload_mass_kg = number("payload_mass_kg", g.payload_mass_kg)
    g.nose_controls.mid_radius_scale = number("nose_mid_radius_scale", g.nose_controls.mid_radius_scale)
    g.nose_controls.shoulder_radius_scale = number(
        "nose_shoulder_radius_scale", g.nose_controls.shoulder_radius_scale
    )
    g.body_controls.fore_radius_scale = number("body_fore_radius_scale", g.body_controls.fore_radius_scale)
    g.body_controls.mid_radius_scale = number("body_mid_radius_scale", g.body_controls.mid_radius_scale)
    g.body_controls.aft_radius_scale = number("body_aft_radius_scale", g.body_controls.aft_radius_scale)
    g.transition_controls.mid_radius_scale = number(
        "transition_mid_radius_scale", g.transition_controls.mid_radius_scale
    )
    g.fin_controls.tip_le_offset_m = number("fin_tip_le_offset_m", g.fin_controls.tip_le_offset_m)
    g.fin_controls.tip_te_offset_m = number("fin_tip_te_offset_m", g.fin_controls.tip_te_offset_m)
    g.fin_controls.span_scale = number("fin_span_scale", g.fin_controls.span_scale)
    g.fin_controls.thickness_scale = number("fin_thickness_scale", g.fin_controls.thickness_scale)
    g.structure_cg_from_nose_m = number("structure_cg_from_nose_m", g.structure_cg_from_nose_m)
    g.propellant_cg_from_nose_m = number("propellant_cg_from_nose_m", g.propellant_cg_from_nose_m)

    # Shapes are checked before materials, each group in file order.
    g.nose_cone_shape = reader.choice("geometry", "nose_cone_shape", NoseConeShape, g.nose_cone_shape)
    g.transition_shape = reader.choice("geometry", "transition_shape", TransitionShape, g.transition_shape)
    g.fin_shape = reader.choice("geometry", "fin_shape", FinShape, g.fin_shape)
    g.nose_material = reader.choice("geometry", "nose_material", ComponentMaterial, g.nose_material)
    g.transition_material = reader.choice(
        "geometry", "transition_material", ComponentMaterial, g.transition_material
    )
    g.body_material = reader.choice("geometry", "body_material", ComponentMaterial, g.body_material)
    g.fin_material = reader.choice("geometry", "fin_material", ComponentMaterial, g.fin_material)
    g.payload_material = reader.choice("geometry", "payload_material", ComponentMaterial, g.payload_material)


def _read_recovery(reader: _Reader, r: RecoverySystem) -> None:
    r.parachute_drag_coefficient = reader.value(
        "recovery.parachute_drag_coefficient", float, r.parachute_drag_coefficient
    )
    r.parachute_area_m2 = reader.value("recovery.parachute_area_m2", float, r.parachute_area_m2)
    r.deployment_altitude_m = reader.value("recovery.deployment_altitude_m", float, r.deployment_altitude_m)
    r.deployment_delay_s = reader.value("recovery.deployment_delay_s", float, r.deployment_delay_s)


def _read_launch_site(reader: _Reader, s: LaunchSite) -> None:
    s.latitude_deg = reader.value("launch_site.latitude_deg", float, s.latitude_deg)
    s.longitude_deg = reader.value("launch_site.longitude_deg", float, s.longitude_deg)
    s.elevation_m = reader.value("launch_site.elevation_m", float, s.elevation_m)


def _read_surface_weather(reader: _Reader, w: SurfaceWeather) -> None:
    w.pressure_hpa = reader.value("surface_weather.pressure_hpa", float, w.pressure_hpa)
    w.temperature_c = reader.value("surface_weather.temperature_c", float, w.temperature_c)
    w.humidity_percent = reader.value("surface_weather.humidity_percent", float, w.humidity_percent)
    w.wind_speed_mps = reader.value("surface_weather.wind_speed_mps", float, w.wind_speed_mps)
    w.wind_direction_deg = reader.value("surface_weather.wind_direction_deg", float, w.wind_direction_deg)
    w.wind_gust_mps = reader.value("surface_weather.wind_gust_mps", float, w.wind_gust_mps)


def _read_motor_settings(reader: _Reader, m: MotorSettings) -> None:
    m.motor_count = reader.value("motor_editor.motor_count", int, m.motor_count)
    m.max_thrust_n = reader.value("motor_editor.max_thrust_n", float, m.max_thrust_n)
    m.burn_time_s = reader.value("motor_editor.burn_time_s", float, m.burn_time_s)
    m.propellant_mass_kg = reader.value("motor_editor.propellant_mass_kg", float, m.propellant_mass_kg)
    m.mount_radius_m = reader.value("motor_editor.mount_radius_m", float, m.mount_radius_m)
    m.cant_angle_deg = reader.value("motor_editor.cant_angle_deg", float, m.cant_angle_deg)


def _read_cluster(reader: _Reader) -> MotorCluster:
    motors = []
    for index in range(reader.count("cluster.count")):
        prefix = f"cluster.motor{index}"
        mounted = MountedMotor()
        motor = mounted.motor
        motor.max_thrust_n = reader.value(f"{prefix}.max_thrust_n", float, motor.max_thrust_n)
        motor.burn_time_s = reader.value(f"{prefix}.burn_time_s", float, motor.burn_time_s)
        motor.propellant_mass_kg = reader.value(f"{prefix}.propellant_mass_kg", float, motor.propellant_mass_kg)
        mounted.mount_position_m = reader.vector(f"{prefix}.mount_position_m", mounted.mount_position_m)
        mounted.thrust_direction_body = reader.vector(
            f"{prefix}.thrust_direction_body", mounted.thrust_direction_body
        )
        mounted.failed = reader.value(f"{prefix}.failed", bool, mounted.failed)
        motors.append(mounted)
    return MotorCluster(motors)


def _read_modifiers(reader: _Reader, component: ComponentType) -> ComponentVertexModifiers:
    section = f"modifier.{component_key(component)}"
    modifiers = ComponentVertexModifiers(component_type=component)
    modifiers.is_active = reader.value(f"{section}.active", bool, modifiers.is_active)
    for index in range(reader.count(f"{section}.count")):
        prefix = f"{section}.vertex{index}"
        vertex = FreeControlVertex()
        vertex.vertex_id = reader.value(f"{prefix}.id", int, vertex.vertex_id)
        vertex.base_position_m = reader.vector(f"{prefix}.base", vertex.base_position_m)
        vertex.offset_m = reader.vector(f"{prefix}.offset", vertex.offset_m)
        vertex.influence_radius_m = reader.value(
            f"{prefix}.influence_radius_m", float, vertex.influence_radius_m
        )
        vertex.locked = reader.value(f"{prefix}.locked", bool, vertex.locked)
        modifiers.modified_vertices.append(vertex)
    return modifiers


def _read_topology(reader: _Reader, component: ComponentType) -> ComponentTopologyOverride:
    section = f"topology.{component_key(component)}"
    topology = ComponentTopologyOverride(component_type=component)
    topology.is_active = reader.value(f"{section}.active", bool, topology.is_active)
    vertex_count = reader.count(f"{section}.vertex_count")
    index_count = reader.count(f"{section}.index_count")
    topology.vertex_positions_body_m = [
        reader.vector(f"{section}.vertex{index}", Vector3()) for index in range(vertex_count)
    ]
    topology.indices = [
        reader.value(f"{section}.index{index}", _Unsigned, 0) for index in range(index_count)
    ]
    return topology


def loads_project(text: str) -> ProjectDocument:
    """Parse the text of a ``.rlab`` project file into a new document."""
    header, _, body = text.partition("\n")
    if _trim(header) != HEADER:
        raise ProjectFormatError("Invalid .rlab header.")

    reader = _Reader(_parse_sections(body))
    document = ProjectDocument()

    document.active_preset = reader.value(
        "project.active_preset",
        RocketPreset,
        document.active_preset,
        "Invalid rocket preset in project file.",
    )

    geometry = document.vehicle.geometry
    _read_geometry(reader, geometry)
    _read_recovery(reader, document.vehicle.recovery_system)
    _read_launch_site(reader, document.launch_site)
    _read_surface_weather(reader, document.surface_weather)

    document.weather_source = reader.value(
        "weather.source", WeatherDataSource, document.weather_source, "Invalid weather source."
    )

    _read_motor_settings(reader, document.motor_settings)

    document.vehicle.cluster = _read_cluster(reader)

    for component in ComponentType:
        geometry.vertex_mods[component] = _read_modifiers(reader, component)
        geometry.topology_overrides[component] = _read_topology(reader, component)

    return document


def save_project(path: PathLike, document: ProjectDocument) -> None:
    """Write ``document`` to ``path``, creating parent directories as needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(dumps_project(document).encode("utf-8"))


def load_project(path: PathLike) -> ProjectDocument:
    """Read a project document from ``path``."""
    data = Path(path).read_bytes()
    return loads_project(data.decode("utf-8", errors="surrogateescape"))