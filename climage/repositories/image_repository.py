from pathlib import Path
from typing import List, Optional, Union
import logging
import numpy as np
import cv2

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O, window calls and pixel copies for Image entities.
    Every cv2 call the project makes goes through here.
    """

    @staticmethod
    def exists(path: Union[str, Path]) -> bool:
        return bool(str(path)) and Path(path).is_file()

    @staticmethod
    def read(path: Union[str, Path]) -> Optional[np.ndarray]:
        """
        Decode `path` with all channels (alpha included).
        Deeper matrices (16-bit PNG, float EXR) are rescaled to uint8.
        Returns None when OpenCV cannot decode the file.
        """
        pixels = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if pixels is None:
            logger.warning(f"cv2.imread could not decode: {path}")
            return None
        return ImageRepository.to_uint8(pixels)

    @staticmethod
    def to_uint8(pixels: np.ndarray) -> np.ndarray:
        if pixels.dtype == np.uint8:
            return pixels
        if np.issubdtype(pixels.dtype, np.integer):
            alpha = 255.0 / np.iinfo(pixels.dtype).max
        else:
            # float images are expected in 0..1
            alpha = 255.0
        logger.debug(f"Rescaling {pixels.dtype} matrix to uint8")
        return cv2.convertScaleAbs(pixels, alpha=alpha)

    @staticmethod
    def write(path: Union[str, Path], pixels: np.ndarray, params: List[int]) -> bool:
        """
        Encode `pixels` to `path`. cv2.error is left to the caller.
        """
        return bool(cv2.imwrite(str(path), pixels, params))

    @staticmethod
    def copy_pixels(pixels: Optional[np.ndarray]) -> Optional[np.ndarray]:
        if pixels is None:
            return None
        return pixels.copy()

    @staticmethod
    def show(title: str, pixels: np.ndarray) -> int:
        """
        Open a window and block until a key is pressed. No timeout.
        """
        cv2.imshow(title, pixels)
        key = cv2.waitKey(0)
        cv2.destroyWindow(title)
        return key
