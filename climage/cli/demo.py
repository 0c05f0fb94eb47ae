"""
Command-line demonstration of the Image handle.

Usage:
  climage-demo [FILENAME] [--skip-display]

Exit codes: 0 ok, 1 no image could be opened, 2 image could not be displayed.
"""

import os
import sys
import logging
import argparse
from typing import Optional
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from climage.models.image import Image
from climage.services.image_service import ImageService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_IMAGE = 1
EXIT_NO_DISPLAY = 2


def setup_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def setup_image(image_service: ImageService, filename: Optional[str]) -> Optional[Image]:
    """Open `filename`, falling back to DEFAULT_IMAGE_FILENAME. None if neither loads."""
    image = image_service.create_image()
    if filename and image_service.load(image, filename):
        return image

    default_filename = os.getenv("DEFAULT_IMAGE_FILENAME", "mario.png")
    if image_service.load(image, default_filename):
        return image
    return None


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="CLImage: open, inspect, copy and save an image",
    )
    parser.add_argument("filename", nargs="?", help="Path to an image file")
    parser.add_argument(
        "--skip-display",
        action="store_true",
        help="Do not open a window (the window blocks until a key is pressed)",
    )
    args = parser.parse_args(argv)

    setup_logging()
    image_service = ImageService()
    row = int(os.getenv("SAMPLE_PIXEL_ROW", "200"))
    col = int(os.getenv("SAMPLE_PIXEL_COL", "150"))

    image = setup_image(image_service, args.filename)
    if image is None:
        print("\n  No image could be opened. Invalid file names!\n")
        return EXIT_NO_IMAGE

    print(f"\n  Successfully opened:  {image.filename}")

    if not args.skip_display:
        print("\n  Displaying image in a new window..")
        if not image_service.display(image):
            print("\n  The image could not be displayed! Exiting program..")
            return EXIT_NO_DISPLAY

    print("\n  Displaying image attributes.")
    channels = image_service.get_pixel_as_ints(image, row, col)
    print(f"\n    Height(rows) => {image_service.height(image)}")
    print(f"    Width(cols)  => {image_service.width(image)}")
    print(f"    Channel #    => {image_service.channel_count(image)}")
    print(f"    Channels at ({row}, {col}):")
    for idx, value in enumerate(channels or ()):
        print(f"      [{idx}] => {value}")

    print("\n  Copying image..")
    copy_img = image_service.copy_image(image)
    result = image_service.save(copy_img)
    if result:
        print(f"\n    Saved copy as: {result.filename}")
    else:
        print(f"\n    Failed to save copy: {result.message}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
