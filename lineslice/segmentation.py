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
lineslice.segmentation
~~~~~~~~~~~~~~~~~~~~~~

Splitting of a page into a known number of horizontal text lines using the
row-wise ink density profile.
"""
from typing import Iterator, List, Optional, Sequence, Tuple

from lineslice.containers import Rectangle
from lineslice.lib.clip import x_clip, y_clip
from lineslice.lib.image import CroppableImage
from lineslice.lib.profile import row_profile

__all__ = ['argmin', 'find_cut', 'segment', 'extract_lines']


def argmin(counts: Sequence[int]) -> int:
    """
    Greedy search for the position of the smallest value in `counts`.

    Ties resolve to the earliest position. The scan stops as soon as a value
    exceeds ten times the current minimum, so the result is not necessarily
    the global minimum.

    Args:
        counts: Non-empty sequence of ink counts.

    Returns:
        Index of the selected minimum.
    """
    min_count = counts[0]
    idx = 0
    for i in range(1, len(counts)):
        if counts[i] < min_count:
            min_count = counts[i]
            idx = i
        if counts[i] > min_count * 10:
            break
    return idx


def find_cut(counts: Sequence[int], start: int, end: int) -> int:
    """
    Selects the split row inside the window `[start, end)` of a row profile.

    An empty window selects `start`.
    """
    if end <= start:
        return start
    return start + argmin(counts[start:end])


def segment(im: CroppableImage, n: int) -> List[Rectangle]:
    """
    Splits a page into `n` horizontal bands, one per text line.

    The page is first clipped vertically to its foreground. For each line the
    blank rows at the top are skipped and the line is cut at the least inked
    row in a window between 2/3 and 2 times the average height of the
    remaining lines. The last line takes whatever is left of the page.

    Args:
        im: Bi-level page image.
        n: Number of lines on the page.

    Returns:
        A list of `n` vertically ordered, non-overlapping rectangles spanning
        the width of the page. Bands that couldn't be allocated any rows are
        empty rectangles.
    """
    if n <= 0:
        return []
    page = y_clip(im)
    b = page.bounds()
    # indexed by page row, rows above the clipped page are never read
    counts = [0] * b.y0 + row_profile(page).tolist()

    bands = []
    top = b.y0
    for i in range(n):
        while top < b.y1 and counts[top] == 0:
            top += 1
        if i == n - 1:
            bottom = b.y1
        else:
            lh = (b.y1 - top) // (n - i)
            bottom = find_cut(counts, top + 2 * lh // 3, top + 2 * lh)
        bands.append(Rectangle(b.x0, top, b.x1, bottom))
        top = bottom
    return bands


def extract_lines(im: CroppableImage,
                  bands: Sequence[Rectangle]) -> Iterator[Tuple[int, Rectangle, Optional[CroppableImage]]]:
    """
    Crops line images out of a page.

    Args:
        im: Page image `bands` have been computed on.
        bands: Output of `segment()`.

    Yields:
        A tuple (line index, band, snippet) for every band. The snippet is
        the band clipped horizontally to its foreground or None if the band
        (or the clipped snippet) is empty.
    """
    for idx, band in enumerate(bands):
        if band.empty:
            yield idx, band, None
            continue
        snippet = x_clip(im.sub_image(band))
        if snippet.bounds().empty:
            yield idx, band, None
            continue
        yield idx, band, snippet
