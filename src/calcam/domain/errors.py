"""Error kinds raised by the inference and nutrition core."""


class CalcamError(Exception):
    """Base error carrying a stable kind and structured context."""

    kind = "calcam_error"

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, object] = context


class InvalidImage(CalcamError, ValueError):
    """Bitmap dimensions or pixel buffer are unusable."""

    kind = "invalid_image"


class ModelLoadError(CalcamError):
    """No backend could load the model artifact."""

    kind = "model_load_error"


class LabelMismatch(ModelLoadError):
    """Label list length differs from the model output length."""

    kind = "label_mismatch"


class InferenceError(CalcamError):
    """A forward pass failed."""

    kind = "inference_error"


class HandleDisposed(CalcamError):
    """The model handle was used after disposal."""

    kind = "handle_disposed"


class InvalidQuantity(CalcamError, ValueError):
    """Gram quantity is not strictly positive."""

    kind = "invalid_quantity"


class InvalidBiometric(CalcamError, ValueError):
    """Biometric input is outside the accepted range."""

    kind = "invalid_biometric"
