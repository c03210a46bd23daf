"""Data model for a rocket design project: enums, geometry, motors and environment."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, TypeVar


class _LabeledEnum(Enum):
    """Enum whose members carry a stable integer value and a display label."""

    label: str

    def __new__(cls, index: int, label: str):
        member = object.__new__(cls)
        member._value_ = index
        member.label = label
        return member

    def __str__(self) -> str:
        return self.label


class NoseConeShape(_LabeledEnum):
    CONICAL = (0, "Conical")
    TANGENT_OGIVE = (1, "Tangent Ogive")
    PARABOLIC = (2, "Parabolic")
    LD_HAACK = (3, "LD-Haack")


class TransitionShape(_LabeledEnum):
    CONICAL = (0, "Conical")
    CURVED = (1, "Curved")


class FinShape(_LabeledEnum):
    TRAPEZOIDAL = (0, "Trapezoidal")
    ELLIPTICAL = (1, "Elliptical")
    AIRFOIL = (2, "Airfoil")


class ComponentMaterial(_LabeledEnum):
    PLA_CF = (0, "PLA-CF")
    ALUMINUM_6061 = (1, "Alluminio 6061")
    PVC = (2, "PVC")
    FIBERGLASS = (3, "Fiberglass")
    CARBON_FIBER = (4, "Carbon Fiber")
    BIRCH_PLYWOOD = (5, "Betulla Aircraft")
    PHENOLIC = (6, "Phenolic Tube")


class RocketPreset(_LabeledEnum):
    RESEARCH_STARTER = (0, "Research Starter")
    SPORT_TRAINER = (1, "Sport Trainer")
    HIGH_ALTITUDE = (2, "High Altitude")
    MINIMUM_DIAMETER = (3, "Minimum Diameter")
    HEAVY_LIFT = (4, "Heavy Lift")


class WeatherDataSource(_LabeledEnum):
    MANUAL = (0, "Manual")
    OPEN_METEO_READY = (1, "Open-Meteo Ready")
    OPEN_WEATHER_MAP_READY = (2, "OpenWeatherMap Ready")


class ComponentType(_LabeledEnum):
    """Vehicle component; the label is the key used in project files."""

    NOSE_CONE = (0, "nose")
    BODY_TUBE = (1, "body")
    TRANSITION = (2, "transition")
    FIN_SET = (3, "fins")
    MOTOR_MOUNT = (4, "motor_mount")
    PAYLOAD = (5, "payload")


E = TypeVar("E", bound=_LabeledEnum)


def parse_label(enum_type: type[E], text: str) -> E:
    """Return the member of ``enum_type`` whose label is exactly ``text``."""
    for member in enum_type:
        if member.label == text:
            return member
    raise ValueError(f"Unknown {enum_type.__name__} label: {text!r}")


def component_key(component: ComponentType) -> str:
    """Key under which a component's sections are stored in a project file."""
    return component.label


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vector3:
        length = self.magnitude()
        if length <= 0.0:
            return Vector3()
        return Vector3(self.x / length, self.y / length, self.z / length)

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Vector3:
        return Vector3(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)


@dataclass(frozen=True)
class Quaternion:
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def norm(self) -> float:
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Quaternion:
        length = self.norm()
        if length <= 0.0:
            return Quaternion()
        return Quaternion(self.w / length, self.x / length, self.y / length, self.z / length)


@dataclass
class FlightState:
    position_m: Vector3 = field(default_factory=Vector3)
    velocity_mps: Vector3 = field(default_factory=Vector3)
    attitude_body_to_world: Quaternion = field(default_factory=Quaternion)
    angular_velocity_body_radps: Vector3 = field(default_factory=Vector3)
    mass_kg: float = 0.0


@dataclass
class NoseControls:
    mid_radius_scale: float = 1.0
    shoulder_radius_scale: float = 1.0


@dataclass
class BodyControls:
    fore_radius_scale: float = 1.0
    mid_radius_scale: float = 1.0
    aft_radius_scale: float = 1.0


@dataclass
class TransitionControls:
    mid_radius_scale: float = 1.0


@dataclass
class FinControls:
    tip_le_offset_m: float = 0.0
    tip_te_offset_m: float = 0.0
    span_scale: float = 1.0
    thickness_scale: float = 1.0


@dataclass
class FreeControlVertex:
    vertex_id: int = 0
    base_position_m: Vector3 = field(default_factory=Vector3)
    offset_m: Vector3 = field(default_factory=Vector3)
    influence_radius_m: float = 0.0
    locked: bool = False


@dataclass
class ComponentVertexModifiers:
    component_type: ComponentType = ComponentType.NOSE_CONE
    is_active: bool = False
    modified_vertices: list[FreeControlVertex] = field(default_factory=list)


@dataclass
class ComponentTopologyOverride:
    component_type: ComponentType = ComponentType.NOSE_CONE
    is_active: bool = False
    vertex_positions_body_m: list[Vector3] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)


T = TypeVar("T")


def _per_component(factory: Callable[[ComponentType], T]) -> Callable[[], dict[ComponentType, T]]:
    return lambda: {component: factory(component) for component in ComponentType}


@dataclass
class VehicleGeometry:
    body_length_m: float = 1.6
    body_diameter_m: float = 0.104
    wall_thickness_m: float = 0.0025
    nose_length_m: float = 0.32
    nose_cone_shape: NoseConeShape = NoseConeShape.TANGENT_OGIVE
    nose_material: ComponentMaterial = ComponentMaterial.FIBERGLASS
    transition_length_m: float = 0.12
    transition_aft_diameter_m: float = 0.08
    transition_shape: TransitionShape = TransitionShape.CONICAL
    transition_material: ComponentMaterial = ComponentMaterial.FIBERGLASS
    body_material: ComponentMaterial = ComponentMaterial.FIBERGLASS
    fin_front_from_nose_m: float = 0.1
    fin_root_chord_m: float = 0.18
    fin_tip_chord_m: float = 0.08
    fin_span_m: float = 0.12
    fin_sweep_length_m: float = 0.08
    fin_thickness_m: float = 0.004
    fin_shape: FinShape = FinShape.TRAPEZOIDAL
    fin_material: ComponentMaterial = ComponentMaterial.CARBON_FIBER
    fin_count: int = 4
    payload_length_m: float = 0.25
    payload_mass_kg: float = 0.5
    payload_material: ComponentMaterial = ComponentMaterial.FIBERGLASS
    nose_controls: NoseControls = field(default_factory=NoseControls)
    body_controls: BodyControls = field(default_factory=BodyControls)
    transition_controls: TransitionControls = field(default_factory=TransitionControls)
    fin_controls: FinControls = field(default_factory=FinControls)
    structure_cg_from_nose_m: float = 0.85
    propellant_cg_from_nose_m: float = 1.35
    vertex_mods: dict[ComponentType, ComponentVertexModifiers] = field(
        default_factory=_per_component(lambda c: ComponentVertexModifiers(component_type=c))
    )
    topology_overrides: dict[ComponentType, ComponentTopologyOverride] = field(
        default_factory=_per_component(lambda c: ComponentTopologyOverride(component_type=c))
    )

    def vertex_modifiers(self, component: ComponentType) -> ComponentVertexModifiers:
        """Free-vertex modifiers of one component, created on first access."""
        return self.vertex_mods.setdefault(component, ComponentVertexModifiers(component_type=component))

    def topology_override(self, component: ComponentType) -> ComponentTopologyOverride:
        """Topology override of one component, created on first access."""
        return self.topology_overrides.setdefault(
            component, ComponentTopologyOverride(component_type=component)
        )


@dataclass
class RecoverySystem:
    parachute_drag_coefficient: float = 1.5
    parachute_area_m2: float = 0.8
    deployment_altitude_m: float = 300.0
    deployment_delay_s: float = 1.0


@dataclass
class Motor:
    max_thrust_n: float = 0.0
    burn_time_s: float = 0.0
    propellant_mass_kg: float = 0.0


@dataclass
class MountedMotor:
    motor: Motor = field(default_factory=Motor)
    mount_position_m: Vector3 = field(default_factory=Vector3)
    thrust_direction_body: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 1.0))
    failed: bool = False


@dataclass
class MotorCluster:
    motors: list[MountedMotor] = field(default_factory=list)

    def motor_count(self) -> int:
        return len(self.motors)

    def total_propellant_mass_kg(self) -> float:
        return math.fsum(mounted.motor.propellant_mass_kg for mounted in self.motors)


@dataclass
class LaunchSite:
    latitude_deg: float = 0.0
    longitude_deg: float = 0.0
    elevation_m: float = 0.0


@dataclass
class SurfaceWeather:
    pressure_hpa: float = 1013.25
    temperature_c: float = 15.0
    humidity_percent: float = 50.0
    wind_speed_mps: float = 0.0
    wind_direction_deg: float = 0.0
    wind_gust_mps: float = 0.0


@dataclass
class MotorSettings:
    motor_count: int = 2
    max_thrust_n: float = 180.0
    burn_time_s: float = 2.4
    propellant_mass_kg: float = 0.24
    mount_radius_m: float = 0.04
    cant_angle_deg: float = 0.0


@dataclass
class VehicleModel:
    dry_mass_kg: float = 8.0
    reference_area_m2: float = math.pi * (0.104 * 0.5) ** 2
    geometry: VehicleGeometry = field(default_factory=VehicleGeometry)
    recovery_system: RecoverySystem = field(default_factory=RecoverySystem)
    cluster: MotorCluster = field(default_factory=MotorCluster)


@dataclass
class ProjectDocument:
    active_preset: RocketPreset = RocketPreset.RESEARCH_STARTER
    vehicle: VehicleModel = field(default_factory=VehicleModel)
    launch_site: LaunchSite = field(default_factory=LaunchSite)
    surface_weather: SurfaceWeather = field(default_factory=SurfaceWeather)
    weather_source: WeatherDataSource = WeatherDataSource.MANUAL
    motor_settings: MotorSettings = field(default_factory=MotorSettings)