"""Photo classification pipeline: preprocess, infer, rank."""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from calcam.domain.vision import Bitmap, ClassificationCandidate
from calcam.services.inference import InferenceExecutor, ModelHandle
from calcam.services.postprocessing import NutrientRef, postprocess
from calcam.services.preprocessing import IMAGENET_MEANS, IMAGENET_STDS, preprocess

_logger = logging.getLogger(__name__)


@dataclass
class ModelProvider:
    """Loads the model on first use and hands out the same handle after."""

    executor: InferenceExecutor
    model_path: str
    labels_loader: Callable[[], list[str]]
    _handle: ModelHandle | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def get(self) -> ModelHandle:
        """Return the loaded handle, loading it if needed."""
        with self._lock:
            if self._handle is None or self._handle.disposed:
                self._handle = self.executor.load(self.model_path, self.labels_loader())
            return self._handle

    @property
    def loaded(self) -> bool:
        """Return True when a live handle exists."""
        return self._handle is not None and not self._handle.disposed

    def close(self) -> None:
        """Dispose the handle if one was loaded."""
        with self._lock:
            if self._handle is not None:
                self.executor.dispose(self._handle)
                self._handle = None


@dataclass
class FoodClassifierService:
    """Runs the full classification pipeline for a bitmap."""

    model: ModelProvider
    top_k: int = 5
    threshold: float = 0.1
    channel_means: Sequence[float] = IMAGENET_MEANS
    channel_stds: Sequence[float] = IMAGENET_STDS
    nutrient_ref: NutrientRef | None = None

    def classify(self, bitmap: Bitmap) -> list[ClassificationCandidate]:
        """Return ranked food candidates for a bitmap."""
        handle = self.model.get()
        tensor = preprocess(
            bitmap, handle.input_size, self.channel_means, self.channel_stds
        )
        scores = self.model.executor.run(handle, tensor)
        candidates = postprocess(
            scores,
            handle.labels,
            top_k=self.top_k,
            threshold=self.threshold,
            nutrient_ref=self.nutrient_ref,
        )
        _logger.info(
            "Classified %sx%s image: %s candidates, top=%s",
            bitmap.width,
            bitmap.height,
            len(candidates),
            candidates[0].label if candidates else None,
        )
        return candidates
