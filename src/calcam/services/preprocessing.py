"""Bitmap to model-input tensor conversion."""

from collections.abc import Sequence

import numpy as np

from calcam.domain.errors import InvalidImage
from calcam.domain.vision import Bitmap, Tensor

RGBA_CHANNELS = 4
IMAGENET_MEANS = (0.485, 0.456, 0.406)
IMAGENET_STDS = (0.229, 0.224, 0.225)


def preprocess(
    bitmap: Bitmap,
    target_size: int,
    channel_means: Sequence[float] = IMAGENET_MEANS,
    channel_stds: Sequence[float] = IMAGENET_STDS,
) -> Tensor:
    """Resize an RGBA bitmap and normalize it into a ``[1, 3, S, S]`` tensor.

    Resampling is nearest-neighbour: destination pixel ``(x, y)`` reads source
    pixel ``(floor(x * src_w / S), floor(y * src_h / S))``. Each channel is
    normalized as ``(raw / 255 - mean) / std`` and alpha is dropped.
    """
    _validate(bitmap, target_size, channel_means, channel_stds)
    pixels = np.frombuffer(bitmap.pixels, dtype=np.uint8).reshape(
        bitmap.height, bitmap.width, RGBA_CHANNELS
    )
    # integer floor keeps the mapping exact for every size pair
    src_x = np.arange(target_size) * bitmap.width // target_size
    src_y = np.arange(target_size) * bitmap.height // target_size
    resized = pixels[src_y[:, None], src_x[None, :], :3]

    means = np.asarray(channel_means, dtype=np.float64)
    stds = np.asarray(channel_stds, dtype=np.float64)
    normalized = (resized.astype(np.float64) / 255.0 - means) / stds
    chw = np.ascontiguousarray(normalized.transpose(2, 0, 1), dtype=np.float32)
    return Tensor(data=chw.ravel(), shape=(1, 3, target_size, target_size))


def _validate(
    bitmap: Bitmap,
    target_size: int,
    channel_means: Sequence[float],
    channel_stds: Sequence[float],
) -> None:
    if bitmap.width <= 0 or bitmap.height <= 0:
        raise InvalidImage(
            "Bitmap width and height must be positive",
            width=bitmap.width,
            height=bitmap.height,
        )
    expected = bitmap.width * bitmap.height * RGBA_CHANNELS
    if len(bitmap.pixels) != expected:
        raise InvalidImage(
            "Pixel buffer length does not match width*height*4",
            expected=expected,
            actual=len(bitmap.pixels),
        )
    if target_size <= 0:
        raise InvalidImage("Target size must be positive", target_size=target_size)
    if len(channel_means) != 3 or len(channel_stds) != 3:  # noqa: PLR2004
        raise InvalidImage(
            "Exactly three channel means and stds are required",
            means=list(channel_means),
            stds=list(channel_stds),
        )
    if any(std == 0 for std in channel_stds):
        raise InvalidImage("Channel stds must be non-zero", stds=list(channel_stds))
