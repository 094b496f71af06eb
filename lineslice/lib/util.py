"""
Ocropus's magic PIL-numpy array conversion routines and small image
helpers.
"""
import numpy as np

from PIL import Image

__all__ = ['pil2array', 'is_bitonal', 'get_im_str']


def pil2array(im: Image.Image) -> np.ndarray:
    if im.mode == '1':
        return np.array(im.convert('L'))
    return np.array(im)


def is_bitonal(im: Image.Image) -> bool:
    """
    Tests a PIL image for bitonality.

    Args:
        im: Image to test

    Returns:
        True if the image contains at most two different color values. False
        otherwise.
    """
    return im.getcolors(2) is not None


def get_im_str(im: Image.Image) -> str:
    return im.filename if getattr(im, 'filename', None) else str(im)
