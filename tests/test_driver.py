# -*- coding: utf-8 -*-
import os
import json
import logging
import unittest
import tempfile

import numpy as np

from PIL import Image, ImageDraw
from pytest import raises

from lineslice.configs import SegmentationConfig
from lineslice.containers import Snippet
from lineslice.driver import SegmentationDriver, count_image_files
from lineslice.lib.exceptions import LineSliceInputException, LineSliceOutputException
from lineslice.lib.image import PageImage


def _write_page(path, size, bands):
    im = Image.new('1', size, 255)
    draw = ImageDraw.Draw(im)
    for y0, y1 in bands:
        draw.rectangle((0, y0, size[0] - 1, y1 - 1), fill=0)
    im.save(path)


class TestSegmentationDriver(unittest.TestCase):

    """
    Tests of the region segmentation driver
    """
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.image = os.path.join(self.tmp.name, 'page.png')
        self.out = os.path.join(self.tmp.name, 'lines', 'page')
        _write_page(self.image, (100, 90), [(10, 20), (40, 50), (70, 80)])
        self.driver = SegmentationDriver(logger=logging.getLogger('lineslice.test'))

    def tearDown(self):
        self.tmp.cleanup()

    def _region(self, text, name='region.json', **kwargs):
        path = os.path.join(self.tmp.name, name)
        data = {'Text': text, 'Dir': self.out, 'Image': self.image}
        data.update(kwargs)
        with open(path, 'w', encoding='utf-8') as fp:
            json.dump(data, fp)
        return path

    def _read(self, name):
        with open(os.path.join(self.out, name), 'r', encoding='utf-8') as fp:
            return fp.read()

    def test_segment_three_lines(self):
        """
        Test that a three line page is written as three snippet/ground truth
        pairs.
        """
        res = self.driver.process(self._region('one\ntwo\nthree'))
        self.assertEqual(res.status, 'segmented')
        self.assertEqual(res.lines, 3)
        self.assertEqual(sorted(os.listdir(self.out)),
                         ['000001.bin.png', '000001.gt.txt',
                          '000002.bin.png', '000002.gt.txt',
                          '000003.bin.png', '000003.gt.txt'])
        self.assertEqual(self._read('000001.gt.txt'), 'one\n')
        self.assertEqual(self._read('000002.gt.txt'), 'two\n')
        self.assertEqual(self._read('000003.gt.txt'), 'three\n')
        for idx in range(1, 4):
            with Image.open(os.path.join(self.out, f'{idx:06d}.bin.png')) as im:
                self.assertEqual(im.size[0], 100)
                self.assertGreaterEqual(im.size[1], 10)
                self.assertGreater(im.histogram()[0], 0)

    def test_snippets_contain_lines(self):
        """
        Test that every snippet fully contains its ink band.
        """
        page = PageImage.open(self.image)
        snippets = list(self.driver.snippets(page, ['one', 'two', 'three']))
        self.assertEqual([s.idx for s in snippets], [1, 2, 3])
        self.assertEqual([s.text for s in snippets], ['one', 'two', 'three'])
        for snippet, (y0, y1) in zip(snippets, [(10, 20), (40, 50), (70, 80)]):
            self.assertFalse(snippet.bbox.empty)
            self.assertLessEqual(snippet.bbox.y0, y0)
            self.assertGreaterEqual(snippet.bbox.y1, y1)

    def test_skip_single_line(self):
        """
        Test that a single line transcription isn't segmented.
        """
        res = self.driver.process(self._region('one'))
        self.assertEqual(res.status, 'skipped')
        self.assertFalse(os.path.exists(self.out))

    def test_skip_no_lines(self):
        res = self.driver.process(self._region(''))
        self.assertEqual(res.status, 'skipped')
        self.assertFalse(os.path.exists(self.out))

    def test_skip_existing_images(self):
        """
        Test that directories with more than one image aren't touched.
        """
        os.makedirs(self.out)
        for name in ('a.png', 'b.png'):
            Image.new('1', (2, 2)).save(os.path.join(self.out, name))
        res = self.driver.process(self._region('one\ntwo\nthree'))
        self.assertEqual(res.status, 'skipped')
        self.assertEqual(sorted(os.listdir(self.out)), ['a.png', 'b.png'])

    def test_single_existing_image(self):
        """
        Test that a single existing image doesn't block a multi-line region.
        """
        os.makedirs(self.out)
        Image.new('1', (2, 2)).save(os.path.join(self.out, '000001.bin.png'))
        res = self.driver.process(self._region('one\ntwo\nthree'))
        self.assertEqual(res.status, 'segmented')
        self.assertEqual(len(res.written), 6)

    def test_idempotent(self):
        """
        Test that a second run doesn't write anything.
        """
        region = self._region('one\ntwo\nthree')
        self.driver.process(region)
        before = {name: os.stat(os.path.join(self.out, name)).st_mtime_ns for name in os.listdir(self.out)}
        res = self.driver.process(region)
        self.assertEqual(res.status, 'skipped')
        self.assertEqual(res.written, [])
        after = {name: os.stat(os.path.join(self.out, name)).st_mtime_ns for name in os.listdir(self.out)}
        self.assertEqual(before, after)

    def test_empty_bands_dense_indices(self):
        """
        Test that empty bands are skipped without leaving gaps in the output
        numbering.
        """
        _write_page(self.image, (10, 20), [(10, 12)])
        res = self.driver.process(self._region('a\nb\nc'))
        self.assertEqual(res.status, 'segmented')
        self.assertEqual(sorted(os.listdir(self.out)), ['000001.bin.png', '000001.gt.txt'])
        self.assertEqual(self._read('000001.gt.txt'), 'c\n')

    def test_custom_suffixes(self):
        driver = SegmentationDriver(SegmentationConfig(suffix='.png', gt_suffix='.txt'))
        driver.process(self._region('one\ntwo\nthree'))
        self.assertEqual(sorted(os.listdir(self.out))[:2], ['000001.png', '000001.txt'])

    def test_dry_run(self):
        """
        Test that a dry run doesn't write any files.
        """
        driver = SegmentationDriver(SegmentationConfig(dry_run=True))
        res = driver.process(self._region('one\ntwo\nthree'))
        self.assertEqual(res.status, 'segmented')
        self.assertEqual(res.written, [])
        self.assertFalse(os.path.exists(self.out))

    def test_missing_image(self):
        """
        Test that an unreadable image results in a failed result.
        """
        res = self.driver.process(self._region('one\ntwo', Image=os.path.join(self.tmp.name, 'missing.png')))
        self.assertTrue(res.failed)
        self.assertIsInstance(res.error, LineSliceInputException)

    def test_invalid_descriptor(self):
        path = os.path.join(self.tmp.name, 'broken.json')
        with open(path, 'w') as fp:
            fp.write('{')
        res = self.driver.process(path)
        self.assertTrue(res.failed)
        self.assertIsInstance(res.error, LineSliceInputException)

    def test_unwritable_output(self):
        """
        Test that a file blocking the output directory fails the region.
        """
        os.makedirs(os.path.dirname(self.out))
        with open(self.out, 'w') as fp:
            fp.write('')
        res = self.driver.process(self._region('one\ntwo\nthree'))
        self.assertTrue(res.failed)
        self.assertIsInstance(res.error, LineSliceOutputException)

    def test_float_image_rejected(self):
        """
        Test that images which can't be written as PNG fail on load without
        leaving any snippet behind.
        """
        a = np.full((90, 100), 255, dtype=np.float32)
        for y0, y1 in [(10, 20), (40, 50), (70, 80)]:
            a[y0:y1] = 0
        image = os.path.join(self.tmp.name, 'page.tif')
        Image.fromarray(a).save(image)
        res = self.driver.process(self._region('one\ntwo\nthree', Image=image))
        self.assertTrue(res.failed)
        self.assertIsInstance(res.error, LineSliceInputException)
        self.assertEqual(os.listdir(self.out) if os.path.exists(self.out) else [], [])

    def test_failed_encoding_leaves_no_file(self):
        """
        Test that a line image that can't be encoded isn't written at all.
        """
        im = Image.new('F', (10, 4), 0.0)
        page = PageImage(im, ink=np.ones((4, 10), dtype=bool))
        snippet = Snippet(idx=1, bbox=page.bounds(), image=page, text='one')
        os.makedirs(self.out)
        with raises(LineSliceOutputException):
            self.driver.write_snippet(self.out, snippet)
        self.assertEqual(os.listdir(self.out), [])

    def test_run_fail_fast(self):
        """
        Test that processing stops after the first failed region.
        """
        bad = self._region('one\ntwo', name='bad.json', Image=os.path.join(self.tmp.name, 'missing.png'))
        good = self._region('one\ntwo\nthree', name='good.json')
        results = list(self.driver.run([bad, good]))
        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].failed)
        self.assertFalse(os.path.exists(self.out))

    def test_run_all(self):
        first = self._region('one\ntwo\nthree', name='first.json')
        second = self._region('one', name='second.json')
        results = list(self.driver.run([first, second]))
        self.assertEqual([r.status for r in results], ['segmented', 'skipped'])


class TestCountImageFiles(unittest.TestCase):

    def test_count_recursive(self):
        with tempfile.TemporaryDirectory() as tmp:
            os.makedirs(os.path.join(tmp, 'sub'))
            for name in ('a.png', 'sub/b.png', 'c.txt', 'sub/d.gt.txt'):
                with open(os.path.join(tmp, name), 'w') as fp:
                    fp.write('')
            self.assertEqual(count_image_files(tmp), 2)

    def test_count_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(count_image_files(os.path.join(tmp, 'missing')), 0)
