import copy

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rocketlab.geometry_cache import CacheUsageStats, GeometryCache, geometry_fingerprint
from rocketlab.model import (
    ComponentType,
    FreeControlVertex,
    NoseConeShape,
    VehicleGeometry,
)


def _recording_cache(capacity=16):
    calls = []

    def analyse(geometry):
        result = ("analysis", geometry.body_length_m, len(calls))
        calls.append(geometry.body_length_m)
        return result

    return GeometryCache(analyse, capacity), calls


@given(st.floats(allow_nan=False, allow_infinity=False))
def test_fingerprint_is_deterministic_and_64_bit(length):
    first = VehicleGeometry(body_length_m=length)
    second = copy.deepcopy(first)
    assert geometry_fingerprint(first) == geometry_fingerprint(second)
    assert 0 <= geometry_fingerprint(first) < 2**64


def test_fingerprint_depends_on_parameters():
    base = VehicleGeometry()
    longer = VehicleGeometry(body_length_m=base.body_length_m + 0.5)
    more_fins = VehicleGeometry(fin_count=base.fin_count + 1)
    other_shape = VehicleGeometry(nose_cone_shape=NoseConeShape.LD_HAACK)
    prints = {geometry_fingerprint(g) for g in (base, longer, more_fins, other_shape)}
    assert len(prints) == len((base, longer, more_fins, other_shape))


def test_fingerprint_ignores_vertex_edits():
    base = VehicleGeometry()
    edited = VehicleGeometry()
    mods = edited.vertex_modifiers(ComponentType.NOSE_CONE)
    mods.is_active = True
    mods.modified_vertices.append(FreeControlVertex(vertex_id=3))
    assert geometry_fingerprint(base) == geometry_fingerprint(edited)


def test_repeated_lookup_hits_l1():
    cache, calls = _recording_cache()
    geometry = VehicleGeometry()
    first = cache.lookup(geometry)
    second = cache.lookup(copy.deepcopy(geometry))
    assert first is second
    assert calls == [geometry.body_length_m]
    stats = cache.stats()
    assert stats.l1_hits == stats.misses
    assert stats.l2_hits == 0


def test_alternating_geometries_hit_l2():
    cache, calls = _recording_cache()
    a = VehicleGeometry(body_length_m=1.0)
    b = VehicleGeometry(body_length_m=2.0)
    first_a = cache.lookup(a)
    cache.lookup(b)
    again_a = cache.lookup(a)
    assert again_a is first_a
    assert calls == [1.0, 2.0]
    stats = cache.stats()
    assert stats.l2_hits == 1
    assert stats.misses == len(calls)
    assert stats.writes == stats.misses


def test_ring_buffer_evicts_oldest_entry():
    capacity = 2
    cache, calls = _recording_cache(capacity)
    geometries = [VehicleGeometry(body_length_m=float(n)) for n in range(capacity + 1)]
    for geometry in geometries:
        cache.lookup(geometry)
    cache.lookup(geometries[0])
    assert calls == [g.body_length_m for g in geometries] + [geometries[0].body_length_m]
    stats = cache.stats()
    assert stats.l2_valid_entries == capacity
    assert stats.l2_capacity == capacity


def test_stats_of_fresh_cache():
    cache, _ = _recording_cache(capacity=5)
    assert cache.stats() == CacheUsageStats(l2_capacity=5)


def test_stats_snapshot_is_detached():
    cache, _ = _recording_cache()
    snapshot = cache.stats()
    cache.lookup(VehicleGeometry())
    assert snapshot.misses == 0
    assert cache.stats().misses == cache.stats().writes


def test_valid_entries_never_exceed_capacity():
    capacity = 3
    cache, _ = _recording_cache(capacity)
    for n in range(capacity * 3):
        cache.lookup(VehicleGeometry(body_length_m=float(n)))
        assert cache.stats().l2_valid_entries <= capacity


@pytest.mark.parametrize("capacity", [0, -1])
def test_invalid_capacity_rejected(capacity):
    with pytest.raises(ValueError):
        GeometryCache(lambda geometry: None, capacity)