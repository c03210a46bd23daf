# rocketlab

Tools for describing a model rocket and working with its design data:

- **`rocketlab.model`** – the vehicle model as dataclasses and enums:
  geometry (`VehicleGeometry`), materials (`ComponentMaterial`), nose cone,
  transition and fin shapes, per-component vertex modifiers and topology
  overrides, the recovery system, the motor cluster, launch site and surface
  weather, all gathered in a `ProjectDocument`.
- **`rocketlab.project_io`** – reading and writing `.rlab` project files, a
  plain `key=value` text format with `[section]` headers.
- **`rocketlab.reports`** – a human-readable flight report and a trajectory
  CSV export.
- **`rocketlab.geometry_cache`** – a two-level cache (one-entry L1, ring-buffer
  L2) keyed by a 64-bit fingerprint of the vehicle geometry, for expensive
  analyses you supply.

No third-party libraries are required.

## Installation

```
pip install .
```

With the test tools:

```
pip install ".[test]"
```

## The model

Enum members carry the display label used in project files and reports:

```python
from rocketlab.model import NoseConeShape, ComponentType, parse_label, component_key

shape = parse_label(NoseConeShape, "Tangent Ogive")   # NoseConeShape.TANGENT_OGIVE
shape.label                                           # "Tangent Ogive"
component_key(ComponentType.FIN_SET)                  # "fins"
```

`parse_label` raises `ValueError` for an unknown label.
`VehicleGeometry.vertex_modifiers(component)` and
`VehicleGeometry.topology_override(component)` return the per-component edit
data. `MotorCluster.motor_count()` and `MotorCluster.total_propellant_mass_kg()`
summarise the mounted motors.

## Saving and loading a project

```python
from rocketlab.model import ProjectDocument, RocketPreset
from rocketlab.project_io import save_project, load_project, ProjectFormatError

document = ProjectDocument()
document.active_preset = RocketPreset.HIGH_ALTITUDE
document.vehicle.geometry.body_length_m = 1.8

save_project("designs/high_altitude.rlab", document)

try:
    loaded = load_project("designs/high_altitude.rlab")
except ProjectFormatError as error:
    print(f"Could not read project: {error}")
```

`dumps_project` and `loads_project` work on text rather than files. A file
begins with the line `rocket_lab_project`; blank lines and lines starting with
`#` are ignored, and keys that are missing keep their default values. A
malformed number or bool, an unknown label or a missing header raises
`ProjectFormatError` (a subclass of `ValueError`). `save_project` creates
parent directories as needed.

## Reports and trajectory export

```python
from rocketlab.model import FlightState
from rocketlab.reports import TrajectoryRecord, export_trajectory_csv

records = [TrajectoryRecord(time_s=0.0, state=FlightState(mass_kg=8.48))]
export_trajectory_csv("out/trajectory.csv", records)
```

`format_trajectory_csv` returns the same CSV as text. `format_report` and
`export_report` render a text summary of the vehicle, one
`SimulationSnapshot` and a `ProjectExportSummary`; they also take a
`StructureMassBreakdown` and a `StructuralAssessment`.

## Caching geometry analyses

```python
from rocketlab.geometry_cache import GeometryCache, geometry_fingerprint

cache = GeometryCache(my_analysis, capacity=16)
result = cache.lookup(document.vehicle.geometry)
cache.stats()        # CacheUsageStats: l1_hits, l2_hits, misses, writes, ...
```

The fingerprint covers the parametric geometry only; vertex modifiers and
topology overrides do not change it.

## What this package does not do

- It has no flight simulation: snapshots, trajectory records and mission
  summaries are values you fill in.
- It does not compute structural masses, material properties or dynamic
  pressure limits; you pass those to the report and to `GeometryCache` as
  your own analysis.
- It has no interactive modelling, no 3D view and no command-line program.

## Running the tests

```
pytest
```