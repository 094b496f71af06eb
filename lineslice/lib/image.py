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
lineslice.lib.image
~~~~~~~~~~~~~~~~~~~

Croppable page image abstraction over decoded bitmaps.
"""
import logging
import numpy as np

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Union

from PIL import Image

from lineslice.containers import Rectangle
from lineslice.lib.util import pil2array, is_bitonal, get_im_str
from lineslice.lib.exceptions import LineSliceInputException

if TYPE_CHECKING:
    from os import PathLike

__all__ = ['CroppableImage', 'PageImage', 'foreground_mask', 'SUPPORTED_MODES']

logger = logging.getLogger(__name__)

SUPPORTED_MODES = ('1', 'L', 'LA', 'I', 'I;16', 'P', 'RGB', 'RGBA', 'CMYK')


class CroppableImage(ABC):
    """
    An image over a rectangular coordinate domain that can be cropped into
    views sharing the same pixel data.
    """
    @abstractmethod
    def bounds(self) -> Rectangle:
        pass

    @abstractmethod
    def sub_image(self, rect: Rectangle) -> 'CroppableImage':
        pass

    @property
    @abstractmethod
    def ink(self) -> np.ndarray:
        """
        Boolean foreground mask over `bounds()`, indexed `[y, x]` relative to
        the top-left corner of the bounds.
        """
        pass


def _palette_black(im: Image.Image) -> np.ndarray:
    """
    Returns the palette indices whose color equals the palette entry nearest
    to opaque black.
    """
    palette = im.getpalette(rawmode='RGB')
    if not palette:
        raise LineSliceInputException(f'Palette image {get_im_str(im)} has no palette')
    palette = np.array(palette, dtype=np.int64).reshape(-1, 3)
    alpha = np.full(len(palette), 255, dtype=np.int64)
    transparency = im.info.get('transparency')
    if isinstance(transparency, int):
        if transparency < len(alpha):
            alpha[transparency] = 0
    elif isinstance(transparency, bytes):
        t = np.frombuffer(transparency, dtype=np.uint8)[:len(alpha)]
        alpha[:len(t)] = t
    entries = np.column_stack((palette, alpha))
    # distances are measured on alpha-premultiplied colors
    premul = palette * alpha[:, None] // 255
    dist = (premul ** 2).sum(axis=1) + (255 - alpha) ** 2
    # first entry wins on ties
    nearest = entries[int(np.argmin(dist))]
    return np.flatnonzero(np.all(entries == nearest, axis=1))


def foreground_mask(im: Image.Image) -> np.ndarray:
    """
    Computes a boolean mask of all pixels equal to black in the image's
    color model.

    For palette images black is the palette entry nearest to opaque black.

    Args:
        im: Input image in one of `SUPPORTED_MODES`.

    Returns:
        A (H, W) boolean array.

    Raises:
        LineSliceInputException: if the color mode is not supported.
    """
    if im.mode not in SUPPORTED_MODES:
        raise LineSliceInputException(f'Unsupported color mode {im.mode} of {get_im_str(im)} '
                                      f'(supported modes: {", ".join(SUPPORTED_MODES)})')
    a = pil2array(im)
    if im.mode == 'P':
        return np.isin(a, _palette_black(im))
    elif im.mode == 'LA':
        return (a[..., 0] == 0) & (a[..., 1] == 255)
    elif im.mode == 'RGB':
        return np.all(a == 0, axis=-1)
    elif im.mode in ('RGBA', 'CMYK'):
        return np.all(a[..., :3] == 0, axis=-1) & (a[..., 3] == 255)
    return a == 0


class PageImage(CroppableImage):
    """
    A bounded view of a decoded page image.

    Sub-images alias the pixel data and foreground mask of their parent. The
    underlying PIL image is never modified.

    Args:
        im: Decoded image.
        ink: Precomputed foreground mask of the whole of `im`.
        rect: Bounds of the view. Defaults to the full image.
    """
    def __init__(self,
                 im: Image.Image,
                 ink: Optional[np.ndarray] = None,
                 rect: Optional[Rectangle] = None):
        self._im = im
        self._ink = ink if ink is not None else foreground_mask(im)
        full = Rectangle(0, 0, *im.size)
        self._rect = full if rect is None else rect.intersect(full)

    @classmethod
    def open(cls, path: Union[str, 'PathLike']) -> 'PageImage':
        """
        Loads a page image from a file.

        Raises:
            LineSliceInputException: if the file can't be read or decoded or
            is in an unsupported color mode.
        """
        try:
            with Image.open(path) as im:
                im.load()
                if not is_bitonal(im):
                    logger.warning(f'{path} contains more than two colors. Only black pixels count as ink.')
                return cls(im)
        except (OSError, Image.DecompressionBombError) as e:
            raise LineSliceInputException(f'Unable to load image {path}: {e}') from e

    def bounds(self) -> Rectangle:
        return self._rect

    def sub_image(self, rect: Rectangle) -> 'PageImage':
        return PageImage(self._im, self._ink, rect.intersect(self._rect))

    @property
    def ink(self) -> np.ndarray:
        r = self._rect
        return self._ink[r.y0:r.y1, r.x0:r.x1]

    @property
    def mode(self) -> str:
        return self._im.mode

    def to_pil(self) -> Image.Image:
        """
        Returns a copy of the view as a PIL image in a mode that can be
        written as PNG. CMYK views are converted to RGB.

        Raises:
            ValueError: if the view is empty.
        """
        if self._rect.empty:
            raise ValueError(f'Cannot convert empty view {self._rect} to an image')
        im = self._im.crop(self._rect.box)
        if im.mode == 'CMYK':
            im = im.convert('RGB')
        return im

    def __repr__(self) -> str:
        return f'PageImage(mode={self._im.mode}, bounds={self._rect})'
