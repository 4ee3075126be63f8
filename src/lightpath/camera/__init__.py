"""Camera module for primary ray generation.

Components:
    pinhole: Simple pinhole (perspective) camera model

Ray generation maps a Sample's continuous image coordinates to
normalized viewport coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image
"""

from .pinhole import PinholeCamera

__all__ = ["PinholeCamera"]
