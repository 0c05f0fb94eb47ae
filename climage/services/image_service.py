from typing import Optional, Sequence, Tuple, Union
import numbers
import logging
import numpy as np
import cv2

from climage.models.image import Image
from climage.models.save_result import SaveResult
from climage.repositories.image_repository import ImageRepository
from climage.services.filename_service import FilenameService

logger = logging.getLogger(__name__)

# Widest pixel the handle will read or write.
MAX_CHANNELS = 5

INTENSITY_OUT_OF_RANGE = -2.0
INTENSITY_CHANNEL_MISMATCH = -1.0


class ImageService:
    """
    Business-level API for Image handles: loading, pixel access, saving and display.
    Failures are reported as False / None / sentinel values, never raised.
    """

    def __init__(self):
        self.image_repository = ImageRepository()
        self.filename_service = FilenameService()

    # ─── Construction & loading ───────────────────────────────────────
    def create_image(self, filename: str = "") -> Image:
        """
        Bind `filename` to a new Image and try to load it.
        A failed load leaves the Image uninitialized.
        """
        image = Image(filename=filename)
        if filename and not self.load(image):
            logger.info(f"Created uninitialized image for: {filename}")
        return image

    def copy_image(self, other: Image) -> Image:
        """
        Deep-copy `other` under a fresh, non-colliding filename.
        """
        return Image(
            filename=self.filename_service.derive_copy_filename(other.filename),
            pixels=self.image_repository.copy_pixels(other.pixels),
        )

    def _resolve_load_path(self, image: Image, filename: str) -> Optional[str]:
        stored = image.filename
        exists = self.image_repository.exists

        if filename and not stored:
            return filename if exists(filename) else None
        if filename and stored:
            # Stored name wins when it is on disk.
            if exists(stored):
                return stored
            return filename if exists(filename) else None
        return stored if exists(stored) else None

    def load(self, image: Image, filename: str = "") -> bool:
        """
        Decode an image file into `image`.

        Args:
            image: An uninitialized Image.
            filename: Optional candidate path, checked after the stored filename.
        Returns:
            True if pixels were decoded. False leaves `image` untouched.
        """
        if image.initialized:
            logger.debug(f"Refusing to reload initialized image: {image.filename}")
            return False
        if not filename and not image.filename:
            logger.debug("No filename to load from")
            return False

        path = self._resolve_load_path(image, filename)
        if path is None:
            logger.warning(f"No existing file among: {image.filename!r}, {filename!r}")
            return False

        pixels = self.image_repository.read(path)
        if pixels is None or pixels.size == 0:
            return False

        image.filename = path
        image.pixels = pixels
        logger.info(f"Loaded {path}: {pixels.shape}")
        return True

    # ─── Pixel access ─────────────────────────────────────────────────
    @staticmethod
    def initialized(image: Image) -> bool:
        return image.initialized

    @staticmethod
    def width(image: Image) -> int:
        if not image.initialized:
            return 0
        return image.pixels.shape[1]

    @staticmethod
    def height(image: Image) -> int:
        if not image.initialized:
            return 0
        return image.pixels.shape[0]

    @staticmethod
    def channel_count(image: Image) -> int:
        if not image.initialized:
            return 0
        if image.pixels.ndim == 2:
            return 1
        return image.pixels.shape[2]

    def in_bounds(self, image: Image, row: int, col: int) -> bool:
        if not image.initialized:
            return False
        return 0 <= row < self.height(image) and 0 <= col < self.width(image)

    def get_pixel(self, image: Image, row: int, col: int) -> Optional[np.ndarray]:
        """
        Returns a copy of the channel values at (row, col), one entry per channel,
        or None if the image is uninitialized, the pixel is out of range, or the
        image has more than MAX_CHANNELS channels.
        """
        if not self.in_bounds(image, row, col):
            return None
        if self.channel_count(image) > MAX_CHANNELS:
            logger.debug(f"Unsupported channel count: {self.channel_count(image)}")
            return None
        return np.atleast_1d(image.pixels[row, col]).copy()

    def get_pixel_as_ints(self, image: Image, row: int, col: int) -> Optional[Tuple[int, ...]]:
        channels = self.get_pixel(image, row, col)
        if channels is None:
            return None
        return tuple(int(c) for c in channels)

    def get_pixel_intensity(self, image: Image, row: int, col: int, channels: int) -> float:
        """
        Unweighted mean of the channel values, truncated to an integer.

        Returns INTENSITY_OUT_OF_RANGE (-2.0) for a pixel outside the image and
        INTENSITY_CHANNEL_MISMATCH (-1.0) if `channels` is not the image's channel count.
        """
        if not self.in_bounds(image, row, col):
            return INTENSITY_OUT_OF_RANGE
        if channels != self.channel_count(image):
            return INTENSITY_CHANNEL_MISMATCH
        values = self.get_pixel_as_ints(image, row, col)
        if values is None:
            return INTENSITY_CHANNEL_MISMATCH
        return float(sum(values) // channels)

    def set_pixel(
            self,
            image: Image,
            row: int,
            col: int,
            values: Union[Sequence[int], np.ndarray],
    ) -> bool:
        """
        Overwrite every channel of (row, col). All values are checked before the
        pixel is touched, so a rejected call leaves the image unchanged.
        """
        if not self.in_bounds(image, row, col):
            return False

        chans = self.channel_count(image)
        if chans > MAX_CHANNELS or len(values) != chans:
            logger.debug(f"Expected {chans} channel values, got {len(values)}")
            return False

        if not all(isinstance(v, (numbers.Integral, np.integer)) for v in values):
            logger.debug(f"Channel values must be integers: {list(values)}")
            return False

        new_values = [int(v) for v in values]
        if any(v < 0 or v > 255 for v in new_values):
            logger.debug(f"Channel value outside 0..255: {new_values}")
            return False

        if image.pixels.ndim == 2:
            image.pixels[row, col] = new_values[0]
        else:
            image.pixels[row, col] = np.asarray(new_values, dtype=image.pixels.dtype)
        return True

    # ─── Save / display ───────────────────────────────────────────────
    def append_default_extension(self, image: Image) -> bool:
        if not image.initialized:
            return False
        image.filename = self.filename_service.with_default_extension(image.filename)
        return True

    def save(self, image: Image) -> SaveResult:
        """
        Write the image to image.filename, choosing the codec from its extension.
        A missing or unknown extension is replaced by ".png" first.
        """
        if not image.initialized or not image.filename:
            return SaveResult(False, image.filename, "image is uninitialized or unnamed")

        if self.filename_service.descriptor_for(image.filename) is None:
            old_name = image.filename
            self.append_default_extension(image)
            logger.info(f"Invalid extension, saving {old_name!r} as {image.filename!r}")

        descriptor = self.filename_service.descriptor_for(image.filename)
        if descriptor is None:
            return SaveResult(False, image.filename, "no usable file extension")

        try:
            written = self.image_repository.write(image.filename, image.pixels, descriptor.params())
        except cv2.error as e:
            logger.error(f"Exception converting image format: {e}")
            return SaveResult(False, image.filename, str(e))

        if not written:
            logger.error(f"cv2.imwrite reported failure for {image.filename}")
            return SaveResult(False, image.filename, "encoder reported failure")

        logger.info(f"Saved {image.filename}")
        return SaveResult(True, image.filename)

    def display(self, image: Image) -> bool:
        """
        Show the image in a window titled with its filename. Blocks until a key is pressed.
        """
        if not image.initialized:
            return False
        try:
            self.image_repository.show(image.filename or "image", image.pixels)
        except cv2.error as e:
            logger.error(f"Could not display {image.filename}: {e}")
            return False
        return True
