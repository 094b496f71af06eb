"""
lineslice.configs
~~~~~~~~~~~~~~~~~

Configuration of segmentation runs.
"""
import logging

__all__ = ['SegmentationConfig']

logger = logging.getLogger(__name__)


class SegmentationConfig:
    """
    Configuration of the segmentation driver.

    Arg:
        > Output parameters

        suffix (str, defaults to '.bin.png'):
            Suffix of the line image files.
        gt_suffix (str, defaults to '.gt.txt'):
            Suffix of the ground truth text files.

        > Processing parameters

        dry_run (bool, defaults to False):
            Computes and logs the line bounds without writing any output.

        > Error handling parameters

        raise_on_error (bool, defaults to False):
            Causes the command line driver to re-raise the exception of a
            failed region descriptor instead of printing the error and
            exiting.
    """
    def __init__(self, **kwargs):
        super().__init__()
        self.suffix = kwargs.pop('suffix', '.bin.png')
        self.gt_suffix = kwargs.pop('gt_suffix', '.gt.txt')
        self.dry_run = kwargs.pop('dry_run', False)
        self.raise_on_error = kwargs.pop('raise_on_error', False)
        if kwargs:
            logger.warning(f'Ignoring unknown configuration keys {", ".join(kwargs)}')
