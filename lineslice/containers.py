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
lineslice.containers
~~~~~~~~~~~~~~~~~~~~

Container classes passed between lineslice's functional blocks.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from lineslice.lib.image import PageImage


__all__ = ['Rectangle',
           'Region',
           'Snippet']


@dataclass(frozen=True)
class Rectangle:
    """
    A half-open, axis-aligned integer rectangle `[x0, x1) × [y0, y1)`.

    Attributes:
        x0: Left edge (inclusive)
        y0: Top edge (inclusive)
        x1: Right edge (exclusive)
        y1: Bottom edge (exclusive)
    """
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def empty(self) -> bool:
        return self.x0 >= self.x1 or self.y0 >= self.y1

    @property
    def width(self) -> int:
        return max(self.x1 - self.x0, 0)

    @property
    def height(self) -> int:
        return max(self.y1 - self.y0, 0)

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """
        The rectangle as a PIL crop box.
        """
        return (self.x0, self.y0, self.x1, self.y1)

    def intersect(self, other: 'Rectangle') -> 'Rectangle':
        """
        Returns the largest rectangle contained in both `self` and `other`.

        Disjoint rectangles intersect to an empty rectangle anchored at the
        clamped top-left corner.
        """
        x0 = max(self.x0, other.x0)
        y0 = max(self.y0, other.y0)
        x1 = max(min(self.x1, other.x1), x0)
        y1 = max(min(self.y1, other.y1), y0)
        return Rectangle(x0, y0, x1, y1)


@dataclass(frozen=True)
class Region:
    """
    A region descriptor pointing to a page image and its transcription.

    Attributes:
        text: Full transcription of the page, one line of text per line.
        dir: Output directory for line snippets and ground truth files.
        image: Path to the source page image.
        source: Path of the file the descriptor was read from.
    """
    text: str
    dir: str
    image: str
    source: Optional[str] = None

    @property
    def lines(self) -> List[str]:
        """
        Ground truth lines of the transcription.

        A trailing newline doesn't add an empty line and carriage returns
        before line breaks are removed.
        """
        if not self.text:
            return []
        lines = self.text.split('\n')
        if lines[-1] == '':
            lines.pop()
        return [line[:-1] if line.endswith('\r') else line for line in lines]


@dataclass
class Snippet:
    """
    A single extracted line image together with its ground truth.

    Attributes:
        idx: 1-based output index.
        bbox: Bounds of the snippet in page coordinates.
        image: Horizontally clipped line image.
        text: Ground truth text of the line.
    """
    idx: int
    bbox: Rectangle
    image: 'PageImage'
    text: str
