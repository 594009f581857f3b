"""ONNX Runtime backed inference sessions."""

from dataclasses import dataclass

import numpy as np
import onnxruntime as ort

from calcam.services.inference import InferenceSession, SessionFactory

EXECUTION_PROVIDERS = {
    "tensorrt": "TensorrtExecutionProvider",
    "cuda": "CUDAExecutionProvider",
    "coreml": "CoreMLExecutionProvider",
    "directml": "DmlExecutionProvider",
    "openvino": "OpenVINOExecutionProvider",
    "cpu": "CPUExecutionProvider",
}


@dataclass
class OnnxRuntimeSession(InferenceSession):
    """Inference session bound to a single execution provider."""

    session: ort.InferenceSession | None
    input_name: str

    def output_size(self) -> int | None:
        """Return the last output dimension if it is a fixed integer."""
        session = self._require_session()
        shape = session.get_outputs()[0].shape
        if shape and isinstance(shape[-1], int):
            return shape[-1]
        return None

    def run(self, data: np.ndarray) -> np.ndarray:
        """Feed a float32 tensor and return the first output."""
        session = self._require_session()
        outputs = session.run(None, {self.input_name: data.astype(np.float32)})
        return np.asarray(outputs[0])

    def release(self) -> None:
        """Drop the runtime session so its memory can be reclaimed."""
        self.session = None

    def _require_session(self) -> ort.InferenceSession:
        if self.session is None:
            raise RuntimeError("ONNX Runtime session has been released")
        return self.session


@dataclass
class OnnxRuntimeSessionFactory(SessionFactory):
    """Creates ONNX Runtime sessions for named backends."""

    graph_optimization: bool = True

    def create(self, model_path: str, backend: str) -> OnnxRuntimeSession:
        """Load the model on the provider mapped from ``backend``."""
        provider = EXECUTION_PROVIDERS.get(backend)
        if provider is None:
            raise ValueError(f"Unknown backend '{backend}'")
        if provider not in ort.get_available_providers():
            raise RuntimeError(f"Execution provider {provider} is not available")

        options = ort.SessionOptions()
        if self.graph_optimization:
            options.graph_optimization_level = (
                ort.GraphOptimizationLevel.ORT_ENABLE_ALL
            )
        options.enable_cpu_mem_arena = True
        options.enable_mem_pattern = True
        session = ort.InferenceSession(
            model_path, sess_options=options, providers=[provider]
        )
        return OnnxRuntimeSession(
            session=session, input_name=session.get_inputs()[0].name
        )
