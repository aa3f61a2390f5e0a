"""
Command-line interface for fractal generation.

Usage:
    fractal-render OUTPUT WxH CAPWxCAPH MAX_ITER SCALE [FRACTAL_TYPE C]

The fractal is evaluated at the capture resolution and resampled to the
output resolution before being written as PNG. A wrong number of positional
arguments prints usage and exits successfully.
"""

import click
import sys
import logging
import time
from pathlib import Path
from typing import Tuple

import numba

from .. import __version__
from ..api import FractalRenderer, RenderParameters
from ..core.fractal_types import FractalKind, parse_complex, parse_fractal_kind
from ..errors import ParseError, UsageError
from ..io.config import ConfigManager, EnvironmentConfig
from ..rendering.coloring import ColorScheme

logger = logging.getLogger(__name__)

USAGE = ("Usage: {prog} <output_file> <width>x<height> <capture_width>x<capture_height> "
         "<max_iter> <scale> [<fractal_type> <c>]")

# Mandelbrot-only form, and the form with fractal type and constant
POSITIONAL_COUNTS = (5, 7)

U32_MAX = 2 ** 32 - 1


def _is_uint(text: str) -> bool:
    return text.isascii() and text.isdigit() and int(text) <= U32_MAX


def parse_resolution(text: str, argument: str = 'resolution') -> Tuple[int, int]:
    """Parse a resolution written as '<width>x<height>'."""
    parts = text.split('x')
    if len(parts) != 2 or not all(_is_uint(p) for p in parts):
        raise ParseError(argument, text, "expected '<width>x<height>' with 32-bit unsigned sizes")
    return int(parts[0]), int(parts[1])


def parse_uint(text: str, argument: str) -> int:
    if not _is_uint(text):
        raise ParseError(argument, text, f"expected an integer from 0 to {U32_MAX}")
    return int(text)


def parse_float(text: str, argument: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise ParseError(argument, text, "expected a number") from None


def parse_positional(args: Tuple[str, ...]) -> Tuple[Path, dict]:
    """
    Convert positional arguments into an output path and parameter values.

    Args:
        args: 5 or 7 positional command-line arguments

    Returns:
        Tuple of (output_path, RenderParameters keyword arguments)
    """
    if len(args) not in POSITIONAL_COUNTS:
        raise UsageError(f"expected 5 or 7 arguments, got {len(args)}")

    output = Path(args[0])
    width, height = parse_resolution(args[1], 'resolution')
    capture_width, capture_height = parse_resolution(args[2], 'capture resolution')
    max_iterations = parse_uint(args[3], 'max_iter')
    scale = parse_float(args[4], 'scale')

    if len(args) == 7:
        fractal = parse_fractal_kind(args[5], args[6])
    else:
        fractal = FractalKind.mandelbrot()

    return output, {
        'width': width,
        'height': height,
        'capture_width': capture_width,
        'capture_height': capture_height,
        'max_iterations': max_iterations,
        'scale': scale,
        'fractal': fractal,
    }


def setup_logging(verbose: bool, quiet: bool, env_level: str = None) -> None:
    """Configure root logging for the command line."""
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        level = getattr(logging, env_level, logging.WARNING) if env_level else logging.WARNING
        logging.basicConfig(level=level, format='%(levelname)s: %(message)s')


@click.command(context_settings={'ignore_unknown_options': True})
@click.argument('args', nargs=-1)
@click.option('--zoom', type=float, help='Magnification around the pan point')
@click.option('--pan', type=str, help='Complex point at the image center "real,imag"')
@click.option('--color-scheme', type=str, help='rainbow, grayscale or blackandwhite')
@click.option('--workers', type=int, help='Number of render threads')
@click.option('--tile-size', type=int, help='Tile size for parallel rendering')
@click.option('--config', type=click.Path(), help='JSON or YAML configuration file')
@click.option('--no-progress', is_flag=True, help='Hide the progress bar')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.option('--version', is_flag=True, help='Show version information')
@click.pass_context
def main(ctx, args, zoom, pan, color_scheme, workers, tile_size, config,
         no_progress, verbose, quiet, version):
    """
    Render a Mandelbrot or Julia set to a PNG image.

    OUTPUT WxH CAPWxCAPH MAX_ITER SCALE [FRACTAL_TYPE C]
    """
    if version:
        click.echo(f"fractal-render v{__version__}")
        click.echo(f"Python: {sys.version}")
        click.echo(f"Numba: {numba.__version__}")
        sys.exit(0)

    try:
        output, values = parse_positional(args)
    except UsageError:
        click.echo(USAGE.format(prog=ctx.info_name))
        sys.exit(0)
    except ParseError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        env_config = EnvironmentConfig.from_environ()
        setup_logging(verbose, quiet, env_config.log_level)

        # Defaults < environment < config file < command line
        values.update(env_config.to_overrides())
        if config:
            values.update(ConfigManager().load_config(Path(config)))

        cli_overrides = {
            'zoom': zoom,
            'pan': parse_complex(pan, 'pan') if pan is not None else None,
            'color_scheme': ColorScheme.from_name(color_scheme) if color_scheme is not None else None,
            'workers': workers,
            'tile_size': tile_size,
        }
        values.update({k: v for k, v in cli_overrides.items() if v is not None})

        params = RenderParameters(**values)
        logger.debug(f"Render parameters: {params}")
        renderer = FractalRenderer(params)

        if verbose:
            for key, value in renderer.get_summary().items():
                click.echo(f"  {key}: {value}")

        start_time = time.time()
        total = renderer.params.capture_width * renderer.params.capture_height

        if no_progress or quiet:
            renderer.render_to_file(output)
        else:
            with click.progressbar(length=total, label='Rendering',
                                   file=click.get_text_stream('stderr')) as bar:
                reported = 0

                def progress_callback(done, total_pixels):
                    nonlocal reported
                    bar.update(done - reported)
                    reported = done

                renderer.render_to_file(output, progress_callback)

        if not quiet:
            click.echo(f"Render complete: {time.time() - start_time:.2f}s")
            click.echo(f"Saved: {output}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
