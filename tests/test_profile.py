# -*- coding: utf-8 -*-
import unittest

import numpy as np

from PIL import Image, ImageDraw

from lineslice.containers import Rectangle
from lineslice.lib.image import PageImage
from lineslice.lib.profile import (row_ink_count, column_ink_count,
                                   row_profile, column_profile)


def _page(size, bands, xs=None):
    im = Image.new('1', size, 255)
    draw = ImageDraw.Draw(im)
    x0, x1 = xs if xs else (0, size[0])
    for y0, y1 in bands:
        draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=0)
    return PageImage(im)


class TestPixelProfiler(unittest.TestCase):

    """
    Tests of the row and column ink counts
    """
    def setUp(self):
        self.page = _page((100, 90), [(10, 20), (40, 50), (70, 80)], xs=(20, 60))

    def test_row_ink_count(self):
        """
        Test counts of inked and blank rows.
        """
        self.assertEqual(row_ink_count(self.page, 10), 40)
        self.assertEqual(row_ink_count(self.page, 19), 40)
        self.assertEqual(row_ink_count(self.page, 20), 0)
        self.assertEqual(row_ink_count(self.page, 0), 0)

    def test_column_ink_count(self):
        """
        Test counts of inked and blank columns.
        """
        self.assertEqual(column_ink_count(self.page, 20), 30)
        self.assertEqual(column_ink_count(self.page, 59), 30)
        self.assertEqual(column_ink_count(self.page, 60), 0)
        self.assertEqual(column_ink_count(self.page, 0), 0)

    def test_out_of_bounds(self):
        """
        Test that coordinates outside the image count 0.
        """
        self.assertEqual(row_ink_count(self.page, -1), 0)
        self.assertEqual(row_ink_count(self.page, 90), 0)
        self.assertEqual(column_ink_count(self.page, 100), 0)

    def test_sub_image_counts(self):
        """
        Test that counts are restricted to the bounds of a view.
        """
        view = self.page.sub_image(Rectangle(30, 15, 50, 45))
        self.assertEqual(row_ink_count(view, 15), 20)
        self.assertEqual(row_ink_count(view, 10), 0)
        self.assertEqual(column_ink_count(view, 40), 10)
        self.assertEqual(column_ink_count(view, 25), 0)

    def test_zero_area(self):
        """
        Test that a zero-area view has no ink anywhere.
        """
        view = self.page.sub_image(Rectangle(30, 15, 30, 15))
        self.assertTrue(view.bounds().empty)
        self.assertEqual(row_ink_count(view, 15), 0)
        self.assertEqual(column_ink_count(view, 30), 0)
        self.assertEqual(len(row_profile(view)), 0)

    def test_profiles(self):
        """
        Test that profiles agree with the single row/column counts.
        """
        rows = row_profile(self.page)
        cols = column_profile(self.page)
        self.assertEqual(len(rows), 90)
        self.assertEqual(len(cols), 100)
        self.assertEqual([row_ink_count(self.page, y) for y in range(90)], rows.tolist())
        self.assertEqual([column_ink_count(self.page, x) for x in range(100)], cols.tolist())
        self.assertEqual(rows.sum(), cols.sum())
        self.assertEqual(np.count_nonzero(rows), 30)
