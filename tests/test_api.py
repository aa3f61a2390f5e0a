import os
import stat
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

import numpy as np
from PIL import Image

from fractal_render.api import FractalRenderer, RenderParameters
from fractal_render.core.fractal_types import FractalKind
from fractal_render.errors import ConfigurationError, OutputError
from fractal_render.rendering.coloring import ColorScheme
from fractal_render.rendering.image_output import RenderMetadata


def make_params(**kwargs):
    values = dict(width=100, height=100, capture_width=100, capture_height=100,
                  max_iterations=50, scale=4.0, workers=2, tile_size=32)
    values.update(kwargs)
    return RenderParameters(**values)


class ValidationTests(unittest.TestCase):
    def test_rejects_zero_values(self):
        for field in ('width', 'height', 'capture_width', 'capture_height', 'max_iterations'):
            with self.subTest(field=field):
                with self.assertRaises(ConfigurationError):
                    FractalRenderer(make_params(**{field: 0}))

    def test_rejects_zero_zoom_and_scale(self):
        with self.assertRaises(ConfigurationError):
            FractalRenderer(make_params(zoom=0.0))
        with self.assertRaises(ConfigurationError):
            FractalRenderer(make_params(scale=0.0))

    def test_rejects_non_finite_view(self):
        cases = [
            dict(scale=float('inf')),
            dict(scale=float('nan')),
            dict(zoom=float('inf')),
            dict(zoom=float('nan')),
            dict(pan=complex(float('inf'), 0.0)),
            dict(pan=complex(0.0, float('nan'))),
            dict(scale=1e308, zoom=1e-10),
        ]
        for kwargs in cases:
            with self.subTest(**kwargs):
                with self.assertRaises(ConfigurationError):
                    FractalRenderer(make_params(**kwargs))

    def test_rejects_bad_performance_settings(self):
        with self.assertRaises(ConfigurationError):
            FractalRenderer(make_params(workers=0))
        with self.assertRaises(ConfigurationError):
            FractalRenderer(make_params(tile_size=0))


class RenderTests(unittest.TestCase):
    def test_center_of_mandelbrot_is_black(self):
        buffer = FractalRenderer(make_params()).render()
        self.assertEqual(buffer.shape, (100, 100, 3))
        self.assertEqual(tuple(buffer[50, 50]), (0, 0, 0))

    def test_julia_buffer_has_capture_resolution(self):
        params = make_params(capture_width=200, capture_height=200, max_iterations=100,
                             fractal=FractalKind.julia(complex(-0.7, 0.27015)))
        buffer = FractalRenderer(params).render()
        self.assertEqual(buffer.shape, (200, 200, 3))
        self.assertTrue(buffer.any())

    def test_zoomed_center_follows_pan(self):
        # -1 lies in the period-2 bulb of the Mandelbrot set
        params = make_params(zoom=10.0, pan=complex(-1.0, 0.0))
        buffer = FractalRenderer(params).render()
        self.assertEqual(tuple(buffer[50, 50]), (0, 0, 0))

    def test_escaped_corner_uses_scheme(self):
        rainbow = FractalRenderer(make_params()).render()
        gray = FractalRenderer(make_params(color_scheme=ColorScheme.GRAYSCALE)).render()
        self.assertNotEqual(tuple(rainbow[0, 0]), tuple(gray[0, 0]))
        self.assertEqual(len(set(int(v) for v in gray[0, 0])), 1)

    def test_summary(self):
        summary = FractalRenderer(make_params(zoom=2.0)).get_summary()
        self.assertEqual(summary['resolution'], '100x100')
        self.assertEqual(summary['bounds'], (-1.0, 1.0, -1.0, 1.0))
        self.assertEqual(summary['workers'], 2)


class RenderToFileTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_writes_output_resolution(self):
        params = make_params(width=60, height=40, capture_width=120, capture_height=80)
        path = FractalRenderer(params).render_to_file(self.tmp / "out.png")
        with Image.open(path) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (60, 40))
            self.assertEqual(img.mode, "RGB")

    def test_same_size_keeps_center_pixel(self):
        path = FractalRenderer(make_params()).render_to_file(self.tmp / "out.png")
        with Image.open(path) as img:
            self.assertEqual(img.getpixel((50, 50)), (0, 0, 0))

    def test_output_is_deterministic(self):
        params = make_params(capture_width=150, capture_height=150, workers=4,
                             fractal=FractalKind.julia(complex(-0.4, 0.6)))
        first = FractalRenderer(params).render_to_file(self.tmp / "a.png")
        second = FractalRenderer(replace(params, workers=1)).render_to_file(self.tmp / "b.png")
        self.assertEqual(first.read_bytes(), second.read_bytes())

    def test_metadata_is_embedded(self):
        params = make_params(fractal=FractalKind.julia(complex(-0.4, 0.6)))
        path = FractalRenderer(params).render_to_file(self.tmp / "out.png")
        with Image.open(path) as img:
            metadata = RenderMetadata.from_json(img.text["FractalMetadata"])
        self.assertEqual(metadata, params.to_metadata())
        self.assertEqual(metadata.fractal_type, 'julia')

    def test_missing_directory_raises_output_error(self):
        target = self.tmp / "missing" / "out.png"
        with self.assertRaises(OutputError):
            FractalRenderer(make_params()).render_to_file(target)
        self.assertFalse(target.exists())

    def test_no_temporary_files_left(self):
        FractalRenderer(make_params()).render_to_file(self.tmp / "out.png")
        self.assertEqual(sorted(p.name for p in self.tmp.iterdir()), ["out.png"])

    def test_file_mode_follows_umask(self):
        umask = os.umask(0o027)
        try:
            path = FractalRenderer(make_params()).render_to_file(self.tmp / "out.png")
        finally:
            os.umask(umask)
        self.assertEqual(stat.S_IMODE(path.stat().st_mode), 0o640)


if __name__ == "__main__":
    unittest.main()
