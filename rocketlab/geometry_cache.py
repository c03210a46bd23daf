"""Two-level cache of per-geometry analyses keyed by a 64-bit fingerprint."""

from __future__ import annotations

import struct
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

from rocketlab.model import VehicleGeometry

_MASK = (1 << 64) - 1
_GOLDEN = 0x9E3779B97F4A7C15
_SEED = 0xCBF29CE484222325

A = TypeVar("A")


def _mix(seed: int, bits: int) -> int:
    return seed ^ ((bits + _GOLDEN + ((seed << 6) & _MASK) + (seed >> 2)) & _MASK)


def _float_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", float(value)))[0]


def _fingerprint_fields(geometry: VehicleGeometry) -> tuple:
    g = geometry
    return (
        g.body_length_m,
        g.body_diameter_m,
        g.wall_thickness_m,
        g.nose_length_m,
        g.nose_cone_shape,
        g.nose_material,
        g.transition_length_m,
        g.transition_aft_diameter_m,
        g.transition_shape,
        g.transition_material,
        g.body_material,
        g.fin_front_from_nose_m,
        g.fin_root_chord_m,
        g.fin_tip_chord_m,
        g.fin_span_m,
        g.fin_sweep_length_m,
        g.fin_thickness_m,
        g.fin_shape,
        g.fin_material,
        float(g.fin_count),
        g.payload_length_m,
        g.payload_mass_kg,
        g.payload_material,
        g.nose_controls.mid_radius_scale,
        g.nose_controls.shoulder_radius_scale,
        g.body_controls.fore_radius_scale,
        g.body_controls.mid_radius_scale,
        g.body_controls.aft_radius_scale,
        g.transition_controls.mid_radius_scale,
        g.fin_controls.tip_le_offset_m,
        g.fin_controls.tip_te_offset_m,
        g.fin_controls.span_scale,
        g.fin_controls.thickness_scale,
        g.structure_cg_from_nose_m,
        g.propellant_cg_from_nose_m,
    )


def geometry_fingerprint(geometry: VehicleGeometry) -> int:
    """64-bit hash of the parametric geometry; vertex edits are not included."""
    seed = _SEED
    for value in _fingerprint_fields(geometry):
        if isinstance(value, Enum):
            bits = int(value.value) & _MASK
        else:
            bits = _float_bits(value)
        seed = _mix(seed, bits)
    return seed


@dataclass
class CacheUsageStats:
    l1_hits: int = 0
    l2_hits: int = 0
    misses: int = 0
    writes: int = 0
    l2_capacity: int = 0
    l2_valid_entries: int = 0


@dataclass(frozen=True)
class _Entry(Generic[A]):
    fingerprint: int
    analysis: A


class GeometryCache(Generic[A]):
    """Caches ``analyse(geometry)`` in a single-entry L1 and a ring-buffer L2."""

    def __init__(self, analyse: Callable[[VehicleGeometry], A], capacity: int = 16) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._analyse = analyse
        self._l1: Optional[_Entry[A]] = None
        self._l2: list[Optional[_Entry[A]]] = [None] * capacity
        self._next_slot = 0
        self._stats = CacheUsageStats(l2_capacity=capacity)

    def lookup(self, geometry: VehicleGeometry) -> A:
        """Return the cached analysis for ``geometry``, computing it on a miss."""
        fingerprint = geometry_fingerprint(geometry)
        if self._l1 is not None and self._l1.fingerprint == fingerprint:
            self._stats.l1_hits += 1
            return self._l1.analysis

        for entry in self._l2:
            if entry is not None and entry.fingerprint == fingerprint:
                self._l1 = entry
                self._stats.l2_hits += 1
                return entry.analysis

        entry = _Entry(fingerprint, self._analyse(geometry))
        self._l1 = entry
        self._l2[self._next_slot] = entry
        self._next_slot = (self._next_slot + 1) % len(self._l2)
        self._stats.misses += 1
        self._stats.writes += 1
        return entry.analysis

    def stats(self) -> CacheUsageStats:
        """Snapshot of the usage counters."""
        valid = sum(1 for entry in self._l2 if entry is not None)
        return replace(self._stats, l2_valid_entries=valid)