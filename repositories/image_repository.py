from pathlib import Path
from typing import Union
from io import BytesIO
import logging
import os
import tempfile

import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError
from dotenv import load_dotenv

from models.errors import CorruptDataError, FileAccessError, UnsupportedFormatError
from models.image import Image
from models.pixel_grid import PixelGrid

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O and raster encode/decode for Image entities.
    """
    # Pillow format name per output suffix
    FORMATS_BY_EXT = {".png": "PNG", ".jpg": "JPEG", ".jpeg": "JPEG"}

    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", ".jpg,.jpeg,.png")
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}

    @staticmethod
    def create_image(grid: PixelGrid, path: Union[str, Path] = None, fmt: str = None) -> Image:
        if path is None:
            return Image(grid, format=fmt)
        return Image(grid=grid, path=Path(path), format=fmt)

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        return img.grid.dimensions()

    # ─── Bytes <-> Image ─────────────────────────────────────────────
    @staticmethod
    def decode(data: bytes, path: Union[str, Path] = None) -> Image:
        """
        Decode raster bytes into an RGBA Image.

        Raises:
            UnsupportedFormatError: bytes are not an image format Pillow knows.
            CorruptDataError: format recognized but the data is truncated or broken.
        """
        try:
            pil_img = PILImage.open(BytesIO(data))
        except UnidentifiedImageError as err:
            raise UnsupportedFormatError(f"Unrecognized image data: {path or '<bytes>'}") from err

        fmt = pil_img.format
        try:
            pil_img.load()
            arr = np.asarray(pil_img.convert("RGBA"))
        except (OSError, SyntaxError, ValueError) as err:
            raise CorruptDataError(f"Corrupt {fmt} data in {path or '<bytes>'}: {err}") from err

        grid = PixelGrid.from_array(arr)
        return ImageRepository.create_image(grid, path, fmt)

    @staticmethod
    def encode(image: Image, fmt: str = "PNG") -> bytes:
        pil_img = image.grid.to_image()
        if fmt.upper() == "JPEG":
            # JPEG has no alpha channel
            pil_img = pil_img.convert("RGB")
        buf = BytesIO()
        pil_img.save(buf, format=fmt)
        return buf.getvalue()

    def format_for_path(self, path: Union[str, Path]) -> str:
        suffix = Path(path).suffix.lower()
        if suffix not in self.FORMATS_BY_EXT:
            raise UnsupportedFormatError(f"No encoder for output extension {suffix!r}: {path}")
        return self.FORMATS_BY_EXT[suffix]

    # ─── Files ───────────────────────────────────────────────────────
    @staticmethod
    def read_bytes(path: Union[str, Path]) -> bytes:
        path = Path(path)
        try:
            return path.read_bytes()
        except OSError as err:
            raise FileAccessError(f"Image not found or unreadable: {path}") from err

    @staticmethod
    def write_bytes(path: Union[str, Path], data: bytes) -> None:
        """
        Write atomically: data goes to a temp file in the target directory
        and is renamed into place only once fully written.
        """
        path = Path(path)
        if not path.parent.is_dir():
            raise FileAccessError(f"Output directory does not exist: {path.parent}")

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as err:
            raise FileAccessError(f"Could not write image: {path}") from err
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.remove(tmp_name)

    def load(self, path: Union[str, Path]) -> Image:
        path = Path(path)
        if path.suffix and path.suffix.lower() not in self.VALID_EXTS:
            logger.warning(f"Unexpected image extension {path.suffix!r}, trying to decode anyway")
        return self.decode(self.read_bytes(path), path)

    def save(self, image: Image) -> None:
        if image.path is None:
            raise FileAccessError("Image has no output path")
        data = self.encode(image, self.format_for_path(image.path))
        self.write_bytes(image.path, data)
