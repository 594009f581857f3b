"""Model lifecycle and forward passes over an ordered list of backends."""

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from calcam.domain.errors import (
    HandleDisposed,
    InferenceError,
    LabelMismatch,
    ModelLoadError,
)
from calcam.domain.vision import Tensor

_logger = logging.getLogger(__name__)


class InferenceSession(Protocol):
    """A model loaded on one backend."""

    def output_size(self) -> int | None:
        """Return the declared class count, or None when it is symbolic."""

    def run(self, data: np.ndarray) -> np.ndarray:
        """Run a forward pass and return the raw output."""

    def release(self) -> None:
        """Release backend resources."""


class SessionFactory(Protocol):
    """Creates inference sessions for a named backend."""

    def create(self, model_path: str, backend: str) -> InferenceSession:
        """Load ``model_path`` on ``backend`` or raise."""


@dataclass(frozen=True)
class BackendAttempt:
    """Outcome of trying to load the model on one backend."""

    backend: str
    session: InferenceSession | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Return True when the backend produced a session."""
        return self.session is not None


@dataclass
class ModelHandle:
    """A loaded model, its labels and the backend serving it."""

    session: InferenceSession
    labels: tuple[str, ...]
    backend: str
    input_size: int
    model_path: str
    attempts: tuple[BackendAttempt, ...] = ()
    disposed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def input_shape(self) -> tuple[int, int, int, int]:
        """Return the tensor shape the model expects."""
        return (1, 3, self.input_size, self.input_size)


@dataclass
class InferenceExecutor:
    """Loads models with backend fallback and executes forward passes.

    ``backends`` is tried in order; the last entry is the baseline. If the
    baseline cannot load the model there is no further fallback and the
    baseline's error is propagated as the cause of ``ModelLoadError``.
    """

    session_factory: SessionFactory
    backends: Sequence[str]
    input_size: int = 224

    def load(self, model_path: str, labels: Sequence[str]) -> ModelHandle:
        """Load a model and bind it to its label list."""
        if not self.backends:
            raise ModelLoadError("No backends configured", model_path=model_path)

        attempts: list[BackendAttempt] = []
        for backend in self.backends:
            attempt = self._try_backend(model_path, backend)
            attempts.append(attempt)
            if attempt.ok:
                break

        selected = attempts[-1]
        if selected.session is None:
            raise ModelLoadError(
                f"Baseline backend '{selected.backend}' failed to load the model",
                model_path=model_path,
                attempts={a.backend: str(a.error) for a in attempts},
            ) from selected.error

        session = selected.session
        output_size = self._resolve_output_size(session, model_path)
        if output_size != len(labels):
            session.release()
            raise LabelMismatch(
                "Label list length does not match model output length",
                labels=len(labels),
                outputs=output_size,
            )

        _logger.info(
            "Loaded model %s on backend=%s with %s labels",
            model_path,
            selected.backend,
            len(labels),
        )
        return ModelHandle(
            session=session,
            labels=tuple(labels),
            backend=selected.backend,
            input_size=self.input_size,
            model_path=model_path,
            attempts=tuple(attempts),
        )

    def run(self, handle: ModelHandle, tensor: Tensor) -> np.ndarray:
        """Run one forward pass and return the flat score vector."""
        if handle.disposed:
            raise HandleDisposed(
                "Model handle has been disposed", backend=handle.backend
            )
        if tuple(tensor.shape) != handle.input_shape:
            raise InferenceError(
                "Tensor shape does not match model input",
                expected=list(handle.input_shape),
                actual=list(tensor.shape),
            )

        with handle._lock:  # noqa: SLF001
            if handle.disposed:
                raise HandleDisposed(
                    "Model handle has been disposed", backend=handle.backend
                )
            try:
                raw = handle.session.run(tensor.as_array())
            except Exception as exc:
                raise InferenceError(
                    "Forward pass failed", backend=handle.backend, error=str(exc)
                ) from exc

        scores = np.asarray(raw, dtype=np.float32).ravel()
        if scores.size != len(handle.labels):
            raise InferenceError(
                "Model returned an unexpected number of scores",
                expected=len(handle.labels),
                actual=int(scores.size),
            )
        return scores

    def dispose(self, handle: ModelHandle) -> None:
        """Release backend resources; later runs raise ``HandleDisposed``."""
        with handle._lock:  # noqa: SLF001
            if handle.disposed:
                return
            handle.disposed = True
            handle.session.release()
        _logger.info(
            "Disposed model %s on backend=%s", handle.model_path, handle.backend
        )

    def _try_backend(self, model_path: str, backend: str) -> BackendAttempt:
        """Attempt to create a session and record the typed outcome."""
        try:
            session = self.session_factory.create(model_path, backend)
        except Exception as exc:  # noqa: BLE001
            _logger.warning(
                "Backend %s unavailable for %s: %s", backend, model_path, exc
            )
            return BackendAttempt(backend=backend, error=exc)
        return BackendAttempt(backend=backend, session=session)

    def _resolve_output_size(self, session: InferenceSession, model_path: str) -> int:
        """Return the class count, probing with a zero tensor if undeclared."""
        declared = session.output_size()
        if declared is not None:
            return declared
        probe = np.zeros((1, 3, self.input_size, self.input_size), dtype=np.float32)
        try:
            output = session.run(probe)
        except Exception as exc:
            session.release()
            raise ModelLoadError(
                "Probe run failed while resolving output size",
                model_path=model_path,
            ) from exc
        return int(np.asarray(output).size)
