"""Film module for radiance accumulation and image output.

Components:
    film: Thread-safe ImageFilm accumulation buffer
    export: 8-bit conversion and PNG saving via Pillow
"""

from .export import image_to_uint8, save_png, save_png_from_array, tone_map
from .film import ImageFilm

__all__ = [
    "ImageFilm",
    "image_to_uint8",
    "save_png",
    "save_png_from_array",
    "tone_map",
]
