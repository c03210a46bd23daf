import pytest
from hypothesis import given
from hypothesis import strategies as st

from rocketlab.model import (
    ComponentMaterial,
    ComponentTopologyOverride,
    ComponentType,
    FinShape,
    FreeControlVertex,
    Motor,
    MotorCluster,
    MountedMotor,
    NoseConeShape,
    ProjectDocument,
    Quaternion,
    RocketPreset,
    TransitionShape,
    Vector3,
    VehicleGeometry,
    WeatherDataSource,
    component_key,
    parse_label,
)

ALL_MEMBERS = [
    member
    for enum_type in (
        NoseConeShape,
        TransitionShape,
        FinShape,
        ComponentMaterial,
        RocketPreset,
        WeatherDataSource,
        ComponentType,
    )
    for member in enum_type
]

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False)


@pytest.mark.parametrize("member", ALL_MEMBERS)
def test_parse_label_round_trip(member):
    assert parse_label(type(member), member.label) is member


@pytest.mark.parametrize(
    "enum_type, text",
    [
        (NoseConeShape, "Ogive"),
        (ComponentMaterial, "alluminio 6061"),
        (WeatherDataSource, ""),
        (RocketPreset, "Research Starter "),
    ],
)
def test_parse_label_rejects_unknown(enum_type, text):
    with pytest.raises(ValueError):
        parse_label(enum_type, text)


def test_material_labels_match_file_format():
    assert parse_label(ComponentMaterial, "Alluminio 6061") is ComponentMaterial.ALUMINUM_6061
    assert parse_label(ComponentMaterial, "Betulla Aircraft") is ComponentMaterial.BIRCH_PLYWOOD
    assert parse_label(WeatherDataSource, "Open-Meteo Ready") is WeatherDataSource.OPEN_METEO_READY
    assert parse_label(NoseConeShape, "LD-Haack") is NoseConeShape.LD_HAACK


def test_component_keys():
    keys = [component_key(component) for component in ComponentType]
    assert keys == ["nose", "body", "transition", "fins", "motor_mount", "payload"]


@given(finite)
def test_magnitude_of_axis_vector(value):
    assert Vector3(value, 0.0, 0.0).magnitude() == pytest.approx(abs(value))
    assert Vector3(0.0, 0.0, value).magnitude() == pytest.approx(abs(value))


@given(finite, finite, finite)
def test_magnitude_scales_linearly(x, y, z):
    vector = Vector3(x, y, z)
    assert (vector * 2.0).magnitude() == pytest.approx(2.0 * vector.magnitude())
    assert vector.magnitude() >= 0.0


@given(finite, finite, finite, finite, finite, finite)
def test_vector_add_sub_round_trip(ax, ay, az, bx, by, bz):
    a = Vector3(ax, ay, az)
    b = Vector3(bx, by, bz)
    back = (a + b) - b
    assert back.x == pytest.approx(a.x, abs=1e-6)
    assert back.y == pytest.approx(a.y, abs=1e-6)
    assert back.z == pytest.approx(a.z, abs=1e-6)


@given(
    st.floats(min_value=0.1, max_value=100.0),
    finite,
    finite,
    finite,
)
def test_quaternion_normalized_has_unit_norm(w, x, y, z):
    assert Quaternion(w, x, y, z).normalized().norm() == pytest.approx(1.0)


def test_motor_cluster_counts_and_propellant():
    first = MountedMotor(motor=Motor(max_thrust_n=180.0, burn_time_s=2.4, propellant_mass_kg=0.24))
    second = MountedMotor(
        motor=Motor(max_thrust_n=180.0, burn_time_s=2.4, propellant_mass_kg=0.3), failed=True
    )
    cluster = MotorCluster([first, second])
    assert cluster.motor_count() == len([first, second])
    assert cluster.total_propellant_mass_kg() == pytest.approx(0.24 + 0.3)


def test_empty_cluster():
    cluster = MotorCluster()
    assert cluster.motor_count() == 0
    assert cluster.total_propellant_mass_kg() == 0.0


@pytest.mark.parametrize("component", list(ComponentType))
def test_geometry_component_state_is_tagged(component):
    geometry = VehicleGeometry()
    assert geometry.vertex_modifiers(component).component_type is component
    assert geometry.topology_override(component).component_type is component
    assert geometry.vertex_modifiers(component).modified_vertices == []


def test_vertex_modifier_mutation_persists_and_is_not_shared():
    geometry = VehicleGeometry()
    other = VehicleGeometry()
    mods = geometry.vertex_modifiers(ComponentType.FIN_SET)
    mods.is_active = True
    mods.modified_vertices.append(FreeControlVertex(vertex_id=7))
    again = geometry.vertex_modifiers(ComponentType.FIN_SET)
    assert again.is_active
    assert [v.vertex_id for v in again.modified_vertices] == [7]
    assert other.vertex_modifiers(ComponentType.FIN_SET).modified_vertices == []
    assert geometry.vertex_modifiers(ComponentType.NOSE_CONE).is_active is False


def test_topology_override_recreated_when_missing():
    geometry = VehicleGeometry()
    del geometry.topology_overrides[ComponentType.PAYLOAD]
    override = geometry.topology_override(ComponentType.PAYLOAD)
    assert override == ComponentTopologyOverride(component_type=ComponentType.PAYLOAD)
    assert geometry.topology_override(ComponentType.PAYLOAD) is override


def test_project_documents_are_independent():
    first = ProjectDocument()
    second = ProjectDocument()
    first.vehicle.geometry.body_length_m += 1.0
    first.vehicle.cluster.motors.append(MountedMotor())
    assert second.vehicle.geometry.body_length_m == VehicleGeometry().body_length_m
    assert second.vehicle.cluster.motor_count() == 0