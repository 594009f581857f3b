"""Loading the label list and seed nutrient dataset from JSON files."""

import json
import logging
from pathlib import Path

from calcam.domain.nutrition import NutrientProfile

_logger = logging.getLogger(__name__)


def load_labels(path: str | Path) -> list[str]:
    """Read labels from ``{"labels": [...]}`` or a bare JSON list."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    labels = payload.get("labels", []) if isinstance(payload, dict) else payload
    if not isinstance(labels, list):
        raise ValueError(f"Label file {path} must contain a list of labels")
    _logger.info("Loaded %s food labels from %s", len(labels), path)
    return [str(label) for label in labels]


def load_food_profiles(path: str | Path) -> list[NutrientProfile]:
    """Read nutrient profiles from a ``{"foods": [...]}`` seed file."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    rows = payload.get("foods", []) if isinstance(payload, dict) else payload
    profiles = [_profile_from_row(row) for row in rows]
    _logger.info("Loaded %s foods from %s", len(profiles), path)
    return profiles


def _profile_from_row(row: dict[str, object]) -> NutrientProfile:
    """Map a seed row onto a nutrient profile."""
    return NutrientProfile(
        id=str(row["id"]),
        name_primary=str(row.get("name_th") or row.get("name_primary") or ""),
        name_secondary=str(row.get("name_en") or row.get("name_secondary") or ""),
        category=str(row.get("category", "")),
        kcal_per_100g=float(row.get("kcal_per_100g", 0)),
        protein_g=float(row.get("protein", row.get("protein_g", 0))),
        carb_g=float(row.get("carb", row.get("carb_g", 0))),
        fat_g=float(row.get("fat", row.get("fat_g", 0))),
        fiber_g=float(row.get("fiber", row.get("fiber_g", 0))),
        tags=tuple(str(tag) for tag in row.get("tags", []) or []),
    )
