"""
raid_exporter.reporting — Console/log reporting for export runs.

Modules:
  summary — Extraction summary block (champion/artifact counts, status).
"""
