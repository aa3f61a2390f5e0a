"""
Fractal type definitions and parameter parsing.

A render draws exactly one quadratic escape-time family: the Mandelbrot set,
where the mapped pixel is the recurrence parameter, or a Julia set, where the
mapped pixel is the seed and the parameter is a fixed constant.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple
import logging

from ..errors import ConfigurationError, ParseError

logger = logging.getLogger(__name__)


class FractalFamily(Enum):
    """Quadratic escape-time families."""

    MANDELBROT = 'mandelbrot'
    JULIA = 'julia'


@dataclass(frozen=True)
class FractalKind:
    """Fractal family with its optional Julia constant."""

    family: FractalFamily = FractalFamily.MANDELBROT
    c: Optional[complex] = None

    def __post_init__(self):
        if self.family is FractalFamily.JULIA and self.c is None:
            raise ConfigurationError("Julia set requires a constant c")
        if self.family is FractalFamily.MANDELBROT and self.c is not None:
            raise ConfigurationError("Mandelbrot set takes no constant")

    @classmethod
    def mandelbrot(cls) -> 'FractalKind':
        return cls(FractalFamily.MANDELBROT)

    @classmethod
    def julia(cls, c: complex) -> 'FractalKind':
        return cls(FractalFamily.JULIA, complex(c))

    @property
    def name(self) -> str:
        return self.family.value

    def seed_and_parameter(self, point: complex) -> Tuple[complex, complex]:
        """Get (z0, c) for the recurrence at a mapped pixel."""
        if self.family is FractalFamily.JULIA:
            return point, self.c
        return 0j, point

    def get_description(self) -> str:
        """Get a description of this fractal."""
        if self.family is FractalFamily.JULIA:
            return f"Julia set: z_{{n+1}} = z_n^2 + c, where c = {self.c} and z_0 is the complex coordinate"
        return "Mandelbrot set: z_{n+1} = z_n^2 + c, where c is the complex coordinate and z_0 = 0"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data = {'type': self.name}
        if self.c is not None:
            data['c_real'] = self.c.real
            data['c_imag'] = self.c.imag
        return data


# Predefined interesting Julia set constants
JULIA_PRESETS = {
    'dragon': complex(-0.75, 0.1),
    'spiral': complex(-0.4, 0.6),
    'dendrite': complex(-0.235125, 0.827215),
    'lightning': complex(-0.8, 0.156),
    'rabbit': complex(-0.123, 0.745),
    'airplane': complex(-1.25, 0.0),
    'san_marco': complex(-0.75, 0.0),
    'siegel_disk': complex(-0.391, -0.587),
}


def parse_complex(text: str, argument: str = 'complex number') -> complex:
    """
    Parse a complex literal written as "re,im".

    Args:
        text: Text to parse, two floats separated by one comma
        argument: Argument name reported on failure

    Returns:
        Parsed complex value
    """
    parts = text.split(',')
    if len(parts) != 2:
        raise ParseError(argument, text, "expected 're,im'")
    try:
        return complex(float(parts[0]), float(parts[1]))
    except ValueError:
        raise ParseError(argument, text, "expected 're,im'") from None


def parse_fractal_kind(fractal_type: str, c: Optional[str] = None) -> FractalKind:
    """
    Build a FractalKind from command-line tokens.

    Args:
        fractal_type: 'mandelbrot' or 'julia'
        c: Julia constant as "re,im" or a preset name; ignored for Mandelbrot

    Returns:
        Configured fractal kind
    """
    try:
        family = FractalFamily(fractal_type)
    except ValueError:
        available = ', '.join(f.value for f in FractalFamily)
        raise ParseError('fractal type', fractal_type, f"available: {available}") from None

    if family is FractalFamily.MANDELBROT:
        if c is not None:
            logger.debug(f"Ignoring constant '{c}' for Mandelbrot set")
        return FractalKind.mandelbrot()

    if c is None:
        raise ParseError('c', None, "julia requires a constant 're,im' or preset name")

    if c in JULIA_PRESETS:
        logger.info(f"Using Julia preset: {c}")
        return FractalKind.julia(JULIA_PRESETS[c])

    return FractalKind.julia(parse_complex(c, 'c'))
