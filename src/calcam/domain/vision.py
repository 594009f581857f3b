"""Models for image tensors and classification results."""

from dataclasses import dataclass

import numpy as np
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Bitmap:
    """RGBA pixel buffer with known dimensions."""

    width: int
    height: int
    pixels: bytes


@dataclass(frozen=True)
class Tensor:
    """Flat float32 buffer with a channel-first shape."""

    data: np.ndarray
    shape: tuple[int, ...]

    def as_array(self) -> np.ndarray:
        """Return the buffer reshaped to ``shape``."""
        return self.data.reshape(self.shape)


class ClassificationCandidate(BaseModel):
    """Single ranked food guess from the classifier."""

    label: str
    confidence: float = Field(ge=0.0, le=1.0)
    nutrient_ref: str | None = None
