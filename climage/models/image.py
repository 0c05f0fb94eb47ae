from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import numpy as np


@dataclass
class Image:
    """
    Simple data object: a filename plus the pixel matrix OpenCV decoded for it.
    No OpenCV logic outside the repository layer.
    """
    filename: str = "" # Empty until the image is named or loaded.
    pixels: Optional[np.ndarray] = None # Shape (H, W) or (H, W, C), dtype uint8 (deeper files are rescaled on load), BGR(A) order.

    @property
    def initialized(self) -> bool:
        return self.pixels is not None and self.pixels.size > 0
