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
lineslice.driver
~~~~~~~~~~~~~~~~

Orchestration of the segmentation of region descriptors into line image and
ground truth pairs.
"""
import os
import logging

from io import BytesIO
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, List, Literal, Optional, Union

from lineslice.configs import SegmentationConfig
from lineslice.containers import Region, Snippet
from lineslice.lib.descriptor import parse_region
from lineslice.lib.exceptions import LineSliceException, LineSliceOutputException
from lineslice.lib.image import PageImage
from lineslice.segmentation import extract_lines, segment

if TYPE_CHECKING:
    from os import PathLike

__all__ = ['SegmentationResult', 'SegmentationDriver', 'count_image_files']


def count_image_files(path: Union[str, 'PathLike']) -> int:
    """
    Counts the PNG files below a directory. Missing or unreadable
    directories contain no files.
    """
    n = 0
    for _, _, files in os.walk(path):
        n += sum(1 for f in files if f.endswith('.png'))
    return n


@dataclass
class SegmentationResult:
    """
    Outcome of processing a single region descriptor.

    Attributes:
        source: Path of the region descriptor.
        status: Whether the region has been segmented, skipped because its
                preconditions weren't met, or failed.
        lines: Number of ground truth lines in the descriptor.
        written: Paths of all files written.
        reason: Explanation why the region has been skipped.
        error: Exception that caused the failure.
    """
    source: str
    status: Literal['segmented', 'skipped', 'failed']
    lines: int = 0
    written: List[str] = field(default_factory=list)
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.status == 'failed'


class SegmentationDriver:
    """
    Segments page images described by region descriptors into line snippets
    and writes them together with their ground truth.

    Args:
        config: Output and processing configuration.
        logger: Logger receiving all progress and diagnostic messages.
    """
    def __init__(self,
                 config: Optional[SegmentationConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config if config is not None else SegmentationConfig()
        self.logger = logger if logger is not None else logging.getLogger('lineslice')

    def check(self, region: Region) -> Optional[str]:
        """
        Decides if a region should be segmented.

        Returns:
            None if segmentation should run, a reason for skipping otherwise.
        """
        nimg = count_image_files(region.dir)
        if nimg > 1:
            return f'{region.dir} already contains {nimg} images'
        nlines = len(region.lines)
        if nlines <= 1:
            return f'transcription has {nlines} line{"" if nlines == 1 else "s"}'
        return None

    def snippets(self, im: PageImage, lines: List[str]) -> Iterator[Snippet]:
        """
        Segments a page into `len(lines)` lines and yields the non-empty
        snippets with dense 1-based indices.
        """
        bands = segment(im, len(lines))
        idx = 0
        for line_idx, band, snippet in extract_lines(im, bands):
            if snippet is None:
                self.logger.info(f'skipping snippet line {line_idx+1}: image is empty')
                continue
            idx += 1
            self.logger.debug(f'line {line_idx+1}: {band} -> {idx:06d}')
            yield Snippet(idx=idx, bbox=snippet.bounds(), image=snippet, text=lines[line_idx])

    def write_snippet(self, dir: Union[str, 'PathLike'], snippet: Snippet) -> List[str]:
        """
        Writes the image and ground truth file of a snippet.

        Returns:
            The paths of the two files.

        Raises:
            LineSliceOutputException: if either file can't be written.
        """
        im_path = os.path.join(dir, f'{snippet.idx:06d}{self.config.suffix}')
        gt_path = os.path.join(dir, f'{snippet.idx:06d}{self.config.gt_suffix}')
        # a failed encoding must not leave a file behind
        buf = BytesIO()
        try:
            snippet.image.to_pil().save(buf, format='png')
        except (OSError, ValueError) as e:
            raise LineSliceOutputException(f'Unable to encode line image {im_path}: {e}', im_path) from e
        try:
            with open(im_path, 'wb') as fp:
                fp.write(buf.getvalue())
        except OSError as e:
            raise LineSliceOutputException(f'Unable to write line image {im_path}: {e}', im_path) from e
        try:
            with open(gt_path, 'w', encoding='utf-8', newline='\n') as fp:
                fp.write(snippet.text + '\n')
        except OSError as e:
            raise LineSliceOutputException(f'Unable to write ground truth {gt_path}: {e}', gt_path) from e
        return [im_path, gt_path]

    def segment_region(self, region: Region) -> List[str]:
        """
        Segments the image of a region and writes all line snippets.

        Returns:
            The paths of all files written.

        Raises:
            LineSliceInputException: if the image can't be loaded.
            LineSliceOutputException: if the output can't be written.
        """
        lines = region.lines
        self.logger.info(f'segmenting {region.image} into {len(lines)} lines')
        if not self.config.dry_run:
            try:
                os.makedirs(region.dir, exist_ok=True)
            except OSError as e:
                raise LineSliceOutputException(f'Unable to create output directory {region.dir}: {e}', region.dir) from e
        im = PageImage.open(region.image)
        written = []
        for snippet in self.snippets(im, lines):
            if self.config.dry_run:
                self.logger.info(f'{snippet.idx:06d}: {snippet.bbox.box} {snippet.text}')
                continue
            written.extend(self.write_snippet(region.dir, snippet))
        return written

    def process(self, path: Union[str, 'PathLike']) -> SegmentationResult:
        """
        Processes a single region descriptor.

        Errors are not raised but returned as a failed result.
        """
        source = str(path)
        nlines = 0
        try:
            region = parse_region(path)
            nlines = len(region.lines)
            reason = self.check(region)
            if reason:
                self.logger.info(f'skipping {source}: {reason}')
                return SegmentationResult(source, 'skipped', lines=nlines, reason=reason)
            written = self.segment_region(region)
        except (LineSliceException, OSError) as e:
            self.logger.error(f'{source}: {e}')
            return SegmentationResult(source, 'failed', lines=nlines, error=e)
        return SegmentationResult(source, 'segmented', lines=nlines, written=written)

    def run(self, paths: Iterable[Union[str, 'PathLike']]) -> Iterator[SegmentationResult]:
        """
        Processes region descriptors in order, stopping after the first
        failure.
        """
        for path in paths:
            result = self.process(path)
            yield result
            if result.failed:
                return
