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
lineslice.lib.profile
~~~~~~~~~~~~~~~~~~~~~

Ink density profiles over image rows and columns.
"""
import numpy as np

from lineslice.lib.image import CroppableImage

__all__ = ['row_ink_count', 'column_ink_count', 'row_profile', 'column_profile']


def row_ink_count(im: CroppableImage, y: int) -> int:
    """
    Counts the foreground pixels in row `y` over the horizontal extent of the
    image bounds. Rows outside the bounds count 0.
    """
    b = im.bounds()
    if not b.y0 <= y < b.y1:
        return 0
    return int(np.count_nonzero(im.ink[y - b.y0]))


def column_ink_count(im: CroppableImage, x: int) -> int:
    """
    Counts the foreground pixels in column `x` over the vertical extent of
    the image bounds. Columns outside the bounds count 0.
    """
    b = im.bounds()
    if not b.x0 <= x < b.x1:
        return 0
    return int(np.count_nonzero(im.ink[:, x - b.x0]))


def row_profile(im: CroppableImage) -> np.ndarray:
    """
    Returns the ink counts of all rows of the image. Index 0 is the top row
    of the bounds.
    """
    return np.count_nonzero(im.ink, axis=1)


def column_profile(im: CroppableImage) -> np.ndarray:
    """
    Returns the ink counts of all columns of the image. Index 0 is the left
    column of the bounds.
    """
    return np.count_nonzero(im.ink, axis=0)
