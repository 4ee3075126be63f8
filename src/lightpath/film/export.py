"""Image export utilities for rendered films.

This module converts a film's linear radiance to 8-bit color and saves it
with Pillow. The default conversion is the plain one: clamp to [0, 1],
scale by 255 and floor. Tone mapping and gamma correction are optional.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.lightpath.film.export import save_png
    >>> from src.lightpath.film.film import ImageFilm
    >>>
    >>> film = ImageFilm(64, 64)
    >>> save_png(film, "output.png", tone_map="reinhard", gamma=2.2)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.lightpath.film.film import ImageFilm

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]


def tone_map(
    image: npt.NDArray[np.float64],
    method: ToneMapMethod = "none",
    exposure: float = 1.0,
) -> npt.NDArray[np.float64]:
    """Compress HDR radiance toward the displayable range.

    Args:
        image: Linear image array of shape (H, W, 3).
        method: "none", "reinhard" (c / (1 + c)) or "exposure"
            (1 - exp(-c * exposure)).
        exposure: Exposure value for exposure tone mapping.

    Raises:
        ValueError: If the method is unknown.
    """
    image = np.maximum(image, 0.0)
    if method == "none":
        return image
    if method == "reinhard":
        return image / (1.0 + image)
    if method == "exposure":
        return 1.0 - np.exp(-image * exposure)
    raise ValueError(f"Unknown tone mapping method: {method!r}")


def image_to_uint8(
    image: npt.NDArray[np.float64],
    *,
    tone_map_method: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8.

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map_method: Tone mapping applied first.
        gamma: Gamma correction value (1.0 leaves values linear).
        exposure: Exposure value for exposure tone mapping.

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    processed = tone_map(image, tone_map_method, exposure)
    if gamma != 1.0:
        processed = np.power(processed, 1.0 / gamma)
    return np.floor(np.clip(processed, 0.0, 1.0) * 255.0).astype(np.uint8)


def save_png(
    film: ImageFilm,
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a film as an 8-bit PNG file.

    Args:
        film: The film to save.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 1.0, linear).
        exposure: Exposure value for exposure tone mapping (default 1.0).
    """
    save_png_from_array(
        film.get_image_numpy(),
        filepath,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )


def save_png_from_array(
    image: npt.NDArray[np.float64],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Save a linear (H, W, 3) array as an 8-bit PNG file."""
    image_uint8 = image_to_uint8(image, tone_map_method=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8).save(filepath)
