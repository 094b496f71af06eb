# -*- coding: utf-8 -*-
"""
lineslice.lib.exceptions
~~~~~~~~~~~~~~~~~~~~~~~~

All custom exceptions raised by lineslice's modules and packages. Packages
should always define their exceptions here.
"""

__all__ = ['LineSliceException',
           'LineSliceInputException',
           'LineSliceOutputException']


class LineSliceException(Exception):

    def __init__(self, message=None):
        Exception.__init__(self, message)


class LineSliceInputException(LineSliceException):
    """
    Raised when a region descriptor or its source image can't be read,
    parsed or decoded.
    """
    def __init__(self, message=None):
        LineSliceException.__init__(self, message)


class LineSliceOutputException(LineSliceException):
    """
    Raised when the output directory or one of the snippet/ground truth files
    can't be written.

    Attributes:
        message (str): Error message
        path (str): Path of the artifact that failed
    """
    def __init__(self, message: str, path: str = None) -> None:
        LineSliceException.__init__(self, message)
        self.message = message
        self.path = path

    def __repr__(self) -> str:
        return repr(self.message)
