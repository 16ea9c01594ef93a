"""
Snapshot validation — runs before any mapping is attempted.

Checks performed
----------------
1. ``heroes``     — the roster section was extracted (may be empty).
2. ``artifacts``  — the artifact section was extracted (may be empty).

All checks run; none short-circuits. A failed result lists every missing
section so a single ``error.json`` names all the problems at once.

Account-level sections (arena league, shards, Great Hall, stage presets) are
NOT required: the account mapper substitutes empty containers for them.

``validate_snapshot()`` returns a ``ValidationResult`` — it does not raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from raid_exporter.models.snapshot import Snapshot

REQUIRED_SECTIONS: tuple[str, ...] = ("heroes", "artifacts")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one snapshot.

    Attributes:
        passed:           True only if every required section is present.
        checks:           Dict of section name -> bool (True = present).
        missing_sections: Names of absent sections, in check order.
        errors:           One ``"<section> missing"`` message per absent section.
    """

    passed:           bool
    checks:           dict[str, bool]
    missing_sections: list[str]
    errors:           list[str]

    @property
    def message(self) -> Optional[str]:
        """Combined failure message, or ``None`` if validation passed."""
        if self.passed:
            return None
        return "Validation failed: " + ", ".join(self.errors)


def validate_snapshot(snapshot: Snapshot) -> ValidationResult:
    """Check that ``snapshot`` carries every section required for export.

    Args:
        snapshot: Snapshot as received from the extractor.

    Returns:
        ValidationResult. Check ``result.passed`` before mapping.
    """
    checks: dict[str, bool] = {}
    missing: list[str] = []

    for section in REQUIRED_SECTIONS:
        present = getattr(snapshot, section) is not None
        checks[section] = present
        if not present:
            missing.append(section)

    return ValidationResult(
        passed=not missing,
        checks=checks,
        missing_sections=missing,
        errors=[f"{section} missing" for section in missing],
    )
