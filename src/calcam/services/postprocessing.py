"""Ranking raw classifier scores into labeled candidates."""

from collections.abc import Callable, Sequence

import numpy as np

from calcam.domain.errors import InferenceError
from calcam.domain.vision import ClassificationCandidate
from calcam.services.rounding import round_half_up

NutrientRef = Callable[[int], str | None]


def sequential_nutrient_ref(prefix: str = "th_", width: int = 3) -> NutrientRef:
    """Map class index 0 to ``{prefix}001``, index 1 to ``{prefix}002`` and so on."""

    def _ref(index: int) -> str:
        return f"{prefix}{index + 1:0{width}d}"

    return _ref


def table_nutrient_ref(table: dict[int, str]) -> NutrientRef:
    """Map class indices through an explicit lookup table."""
    return table.get


def softmax(scores: Sequence[float] | np.ndarray) -> np.ndarray:
    """Numerically stable softmax over a 1-D score vector."""
    logits = np.asarray(scores, dtype=np.float64).ravel()
    if logits.size == 0:
        return logits
    shifted = np.exp(logits - logits.max())
    return shifted / shifted.sum()


def postprocess(
    scores: Sequence[float] | np.ndarray,
    labels: Sequence[str],
    top_k: int,
    threshold: float,
    nutrient_ref: NutrientRef | None = None,
) -> list[ClassificationCandidate]:
    """Return at most ``top_k`` candidates with probability >= ``threshold``.

    Ranking uses the unrounded probability, ties broken by ascending class
    index. Emitted confidences are rounded to two decimals.
    """
    logits = np.asarray(scores, dtype=np.float64).ravel()
    non_finite = np.flatnonzero(~np.isfinite(logits))
    if non_finite.size:
        index = int(non_finite[0])
        raise InferenceError(
            "Model returned a non-finite score",
            index=index,
            value=str(logits[index]),
        )
    probabilities = softmax(logits)
    if top_k <= 0 or probabilities.size == 0:
        return []
    ref = nutrient_ref or sequential_nutrient_ref()
    indices = np.arange(probabilities.size)
    # lexsort sorts by the last key first
    order = np.lexsort((indices, -probabilities))

    candidates: list[ClassificationCandidate] = []
    for index in order[:top_k]:
        probability = float(probabilities[index])
        if probability < threshold:
            break
        idx = int(index)
        label = labels[idx] if idx < len(labels) else f"Unknown_{idx}"
        candidates.append(
            ClassificationCandidate(
                label=label,
                confidence=round_half_up(probability, 2),
                nutrient_ref=ref(idx),
            )
        )
    return candidates
