# services/filename_service.py
import string
from typing import Optional

from climage.models.format_descriptor import FORMAT_TABLE, DEFAULT_EXTENSION, FormatDescriptor

EMPTY_INPUT = -3
NO_EXTENSION = -2
INVALID_EXTENSION = -1


class FilenameService:
    """
    Extension validation and filename generation.
    Pure string logic, nothing here touches the disk.
    """

    @staticmethod
    def extension_index(filename: str) -> int:
        """
        Returns:
            EMPTY_INPUT if filename is empty,
            NO_EXTENSION if it has no '.' (or only a leading one),
            INVALID_EXTENSION if the extension is not in FORMAT_TABLE,
            otherwise the index of the matching FormatDescriptor.
        """
        if not filename:
            return EMPTY_INPUT

        dot = filename.rfind(".")
        if dot <= 0:
            return NO_EXTENSION

        ext = filename[dot:]
        for idx, descriptor in enumerate(FORMAT_TABLE):
            if ext == descriptor.extension:
                return idx
        return INVALID_EXTENSION

    @classmethod
    def descriptor_for(cls, filename: str) -> Optional[FormatDescriptor]:
        idx = cls.extension_index(filename)
        if idx < 0:
            return None
        return FORMAT_TABLE[idx]

    @staticmethod
    def strip_extension(filename: str) -> Optional[str]:
        """
        Drop everything from the last '.'; None if there is nothing to drop.
        The whole path is searched, so a dot in a directory name counts:
        "../out/photo" becomes "." and "dir.v2/photo" becomes "dir".
        """
        dot = filename.rfind(".")
        if dot <= 0:
            return None
        return filename[:dot]

    @classmethod
    def with_default_extension(cls, filename: str) -> str:
        stripped = cls.strip_extension(filename)
        if stripped is None:
            stripped = filename
        return stripped + DEFAULT_EXTENSION

    @classmethod
    def derive_copy_filename(cls, seed: str) -> str:
        """
        Build a filename for a duplicated image.

        example.png   -> example_1.png
        example_1.png -> example_2.png
        example1.png  -> example1.png  (digits without '_' are left alone)

        Returns "" if seed is empty or has no valid extension.
        """
        if not seed or cls.extension_index(seed) < 0:
            return ""

        ext_start = seed.rfind(".")
        mod_start = ext_start - 1

        if seed[mod_start] not in string.digits:
            return seed[:ext_start] + "_1" + seed[ext_start:]

        while mod_start >= 0 and seed[mod_start] in string.digits:
            mod_start -= 1

        if mod_start > 0 and seed[mod_start] == "_":
            counter = int(seed[mod_start + 1:ext_start]) + 1
            return f"{seed[:mod_start]}_{counter}{seed[ext_start:]}"

        return seed
