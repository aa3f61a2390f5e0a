"""
Image resampling and PNG export for fractal rendering.

The capture buffer is resized to the output resolution with a Lanczos filter
and written as PNG with the render parameters embedded as a text chunk.
Files are written to a temporary name and moved into place, so a failed
export never leaves a truncated image behind.
"""

import numpy as np
from typing import Any, Dict, Optional, Tuple
from pathlib import Path
from dataclasses import dataclass, asdict, field
import json
import logging
import os
import tempfile

from PIL import Image, PngImagePlugin

from .. import __version__
from ..errors import OutputError

logger = logging.getLogger(__name__)


def _default_file_mode() -> int:
    """Mode a plain open() would give a new file under the current umask."""
    # os.umask can only be read by setting it
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@dataclass
class RenderMetadata:
    """Metadata embedded in rendered images."""

    fractal_type: str
    resolution: Tuple[int, int]  # width, height
    capture_resolution: Tuple[int, int]
    max_iterations: int
    scale: float
    zoom: float
    pan: Tuple[float, float]
    color_scheme: str
    software_version: str = __version__
    fractal_parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert to JSON string with stable key order."""
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> 'RenderMetadata':
        """Create metadata from JSON string."""
        data = json.loads(json_str)
        for key in ('resolution', 'capture_resolution', 'pan'):
            data[key] = tuple(data[key])
        return cls(**data)


class ImageExporter:
    """Lanczos resampling and PNG export."""

    def __init__(self, compress_level: int = 6):
        """
        Initialize image exporter.

        Args:
            compress_level: zlib level from 0 (none) to 9 (max)
        """
        self.compress_level = compress_level

    def resample(self, image_array: np.ndarray, width: int, height: int) -> Image.Image:
        """
        Resize an RGB buffer to the output resolution.

        Args:
            image_array: uint8 RGB array (height, width, 3)
            width, height: Output resolution

        Returns:
            Resized PIL image
        """
        if image_array.ndim != 3 or image_array.shape[2] != 3:
            raise ValueError(f"Expected RGB image array (H, W, 3), got {image_array.shape}")

        pil_image = Image.fromarray(np.ascontiguousarray(image_array, dtype=np.uint8))
        if pil_image.size == (width, height):
            return pil_image

        logger.debug(f"Resampling {pil_image.size[0]}x{pil_image.size[1]} -> {width}x{height}")
        return pil_image.resize((width, height), Image.Resampling.LANCZOS)

    def save_png(self, pil_image: Image.Image, filepath: Path,
                 metadata: Optional[RenderMetadata] = None) -> Path:
        """
        Save as PNG with metadata.

        Args:
            pil_image: Image to save
            filepath: Output file path
            metadata: Render metadata to embed

        Returns:
            Path of the written file
        """
        filepath = Path(filepath)
        pnginfo = PngImagePlugin.PngInfo()

        if metadata:
            pnginfo.add_text("Software", f"fractal-render v{metadata.software_version}")
            pnginfo.add_text("FractalMetadata", metadata.to_json())

        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{filepath.name}.", suffix=".tmp",
                                            dir=filepath.parent)
        except OSError as e:
            raise OutputError(f"Could not write '{filepath}': {e}") from e

        try:
            with os.fdopen(fd, 'wb') as f:
                pil_image.save(f, "PNG", pnginfo=pnginfo, compress_level=self.compress_level)
            os.chmod(tmp_name, _default_file_mode())
            os.replace(tmp_name, filepath)
        except OSError as e:
            os.unlink(tmp_name)
            raise OutputError(f"Could not write '{filepath}': {e}") from e
        except BaseException:
            os.unlink(tmp_name)
            raise

        logger.info(f"Saved image: {filepath} ({pil_image.size[0]}x{pil_image.size[1]})")
        return filepath

    def save_image(self, image_array: np.ndarray, filepath: Path, width: int, height: int,
                   metadata: Optional[RenderMetadata] = None) -> Path:
        """Resample an RGB buffer and save it as PNG."""
        return self.save_png(self.resample(image_array, width, height), filepath, metadata)
