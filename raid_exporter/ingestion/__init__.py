"""
Ingestion layer — the boundary to the external process inspector.

Submodules:
  extractor — Snapshot extractors (dump file, fixture) and the exceptions /
              message normalization for "client not running".

Dump placement (config/default.toml [extractor], or RAID_EXPORTER_DUMP_PATH):
  dump_path = "data/raid_dump.json"
"""
