import unittest

from fractal_render.core.fractal_types import (
    FractalFamily,
    FractalKind,
    JULIA_PRESETS,
    parse_complex,
    parse_fractal_kind,
)
from fractal_render.errors import ConfigurationError, ParseError


class FractalKindTests(unittest.TestCase):
    def test_mandelbrot_seeds_at_origin(self):
        kind = FractalKind.mandelbrot()
        self.assertEqual(kind.family, FractalFamily.MANDELBROT)
        self.assertEqual(kind.seed_and_parameter(complex(0.5, 0.5)), (0j, complex(0.5, 0.5)))

    def test_julia_seeds_at_point(self):
        kind = FractalKind.julia(complex(-0.7, 0.27015))
        self.assertEqual(kind.seed_and_parameter(complex(0.5, 0.5)),
                         (complex(0.5, 0.5), complex(-0.7, 0.27015)))

    def test_julia_requires_constant(self):
        with self.assertRaises(ConfigurationError):
            FractalKind(FractalFamily.JULIA)

    def test_mandelbrot_rejects_constant(self):
        with self.assertRaises(ConfigurationError):
            FractalKind(FractalFamily.MANDELBROT, 1j)

    def test_to_dict(self):
        self.assertEqual(FractalKind.mandelbrot().to_dict(), {'type': 'mandelbrot'})
        self.assertEqual(FractalKind.julia(complex(-0.4, 0.6)).to_dict(),
                         {'type': 'julia', 'c_real': -0.4, 'c_imag': 0.6})


class ParseTests(unittest.TestCase):
    def test_parse_complex(self):
        self.assertEqual(parse_complex("-0.7,0.27015"), complex(-0.7, 0.27015))

    def test_parse_complex_rejects_malformed(self):
        for text in ("-0.7", "1,2,3", "a,b", ",", ""):
            with self.assertRaises(ParseError):
                parse_complex(text, 'c')

    def test_parse_error_names_argument(self):
        with self.assertRaises(ParseError) as ctx:
            parse_complex("oops", 'pan')
        self.assertEqual(ctx.exception.argument, 'pan')
        self.assertIn("pan", str(ctx.exception))

    def test_parse_mandelbrot_ignores_constant(self):
        self.assertEqual(parse_fractal_kind("mandelbrot", "1,1"), FractalKind.mandelbrot())

    def test_parse_julia(self):
        self.assertEqual(parse_fractal_kind("julia", "-0.7,0.27015"),
                         FractalKind.julia(complex(-0.7, 0.27015)))

    def test_parse_julia_preset(self):
        self.assertEqual(parse_fractal_kind("julia", "rabbit"), FractalKind.julia(JULIA_PRESETS['rabbit']))

    def test_parse_julia_without_constant(self):
        with self.assertRaises(ParseError) as ctx:
            parse_fractal_kind("julia")
        self.assertEqual(ctx.exception.argument, 'c')

    def test_parse_unknown_type(self):
        with self.assertRaises(ParseError) as ctx:
            parse_fractal_kind("burning_ship", None)
        self.assertEqual(ctx.exception.argument, 'fractal type')


if __name__ == "__main__":
    unittest.main()
