from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import cv2


@dataclass(frozen=True)
class FormatDescriptor:
    """
    Value-object pairing a file extension with the cv2.imwrite
    parameter that controls its compression.
    """
    extension: str   # Including the dot, e.g. ".png"
    codec_flag: int  # cv2.IMWRITE_* constant
    level: int       # Quality / compression level for codec_flag

    def params(self) -> List[int]:
        return [self.codec_flag, self.level]


DEFAULT_EXTENSION = ".png"

# Index order is part of the contract: extension_index() returns positions in this table.
FORMAT_TABLE: Tuple[FormatDescriptor, ...] = (
    # Portable Network Graphics
    FormatDescriptor(".png", cv2.IMWRITE_PNG_COMPRESSION, 9),
    # JPEG
    FormatDescriptor(".jpg", cv2.IMWRITE_JPEG_QUALITY, 100),
    FormatDescriptor(".jpeg", cv2.IMWRITE_JPEG_QUALITY, 100),
    # Netpbm
    FormatDescriptor(".pbm", cv2.IMWRITE_PXM_BINARY, 1),
    FormatDescriptor(".pgm", cv2.IMWRITE_PXM_BINARY, 1),
    FormatDescriptor(".ppm", cv2.IMWRITE_PXM_BINARY, 1),
)
