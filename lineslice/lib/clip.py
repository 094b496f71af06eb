#
# Copyright 2023 Benjamin Kiessling
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express
# or implied. See the License for the specific language governing
# permissions and limitations under the License.
"""
lineslice.lib.clip
~~~~~~~~~~~~~~~~~~

Clipping of images to the bounding box of their foreground pixels.
"""
from typing import Tuple, TypeVar

import numpy as np

from lineslice.containers import Rectangle
from lineslice.lib.image import CroppableImage
from lineslice.lib.profile import row_profile, column_profile

__all__ = ['y_clip', 'x_clip', 'bbox']

_Img = TypeVar('_Img', bound=CroppableImage)


def _extent(counts: np.ndarray, start: int, end: int) -> Tuple[int, int]:
    # without any ink the extent collapses onto the end of the range
    idx = np.flatnonzero(counts)
    if not len(idx):
        return end, end
    return start + int(idx[0]), start + int(idx[-1]) + 1


def y_clip(im: _Img) -> _Img:
    """
    Removes the blank rows at the top and bottom of an image.

    Args:
        im: Input image

    Returns:
        A view of `im` spanning the smallest row range containing all its
        foreground pixels. An empty view if the image has no foreground.
    """
    b = im.bounds()
    y0, y1 = _extent(row_profile(im), b.y0, b.y1)
    return im.sub_image(Rectangle(b.x0, y0, b.x1, y1))


def x_clip(im: _Img) -> _Img:
    """
    Removes the blank columns on the left and right of an image.

    Args:
        im: Input image

    Returns:
        A view of `im` spanning the smallest column range containing all its
        foreground pixels. An empty view if the image has no foreground.
    """
    b = im.bounds()
    x0, x1 = _extent(column_profile(im), b.x0, b.x1)
    return im.sub_image(Rectangle(x0, b.y0, x1, b.y1))


def bbox(im: _Img) -> _Img:
    """
    Clips an image in both directions.
    """
    return x_clip(y_clip(im))
