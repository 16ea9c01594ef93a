"""
raid_exporter.export — the snapshot → JSON documents pipeline.

Modules:
  validator   — Structural completeness checks on a Snapshot.
  mappers     — Pure Snapshot → output-document transforms.
  writer      — Deterministic serialization and atomic file writes.
  reporter    — Best-effort ``error.json`` writer that never raises.
  coordinator — Export run state machine and the scan runner.
"""
