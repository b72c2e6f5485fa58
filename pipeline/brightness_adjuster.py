"""
Brightness Adjuster Pipeline
Loads one image, applies the requested adjustment in memory, and saves the
result under a fixed output name. The output file is written only after the
whole pass succeeded.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

from models.errors import FileAccessError
from models.image_adjustments import Adjustment
from services.image_service import ImageService
from services.image_adjustment_service import ImageAdjustmentService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Output location; the directory must already exist
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "new_images")
OUTPUT_FILENAME = os.getenv("OUTPUT_FILENAME", "obaa_image.png")


def adjust_image_file(
    image_path: str | Path,
    adjustment: Adjustment,
    *,
    image_service: ImageService = None,
    adjustment_service: ImageAdjustmentService = None,
    output_dir: str | Path = OUTPUT_DIR,
    output_filename: str = OUTPUT_FILENAME,
) -> Path:
    """
    Apply `adjustment` to the image at `image_path` and save the result.

    Args:
        image_path: Input raster, relative to the working directory
        adjustment: What to apply
        image_service: Service for image I/O
        adjustment_service: Service running the parallel pixel pass
        output_dir: Existing directory for the result
        output_filename: Result file name; its extension picks the encoder

    Returns:
        Path: Where the adjusted image was written
    """
    ImageAdjustmentService.check_supported(adjustment)
    if not Path(output_dir).is_dir():
        raise FileAccessError(f"Output directory does not exist: {output_dir}")
    image_service = image_service or ImageService()

    img = image_service.load(image_path)
    width, height = image_service.get_image_dimensions(img)
    before = image_service.mean_brightness(img)
    logger.info(f"Loaded {img.path} ({img.format}, {width}x{height}), mean brightness {before:.1f}")

    adjustment_service = adjustment_service or ImageAdjustmentService()
    adjustment_service.apply(img, adjustment)

    after = image_service.mean_brightness(img)
    logger.info(f"Mean brightness {before:.1f} -> {after:.1f}")

    img.path = Path(output_dir) / output_filename
    image_service.save(img)
    logger.info(f"Adjusted image written to {img.path}")
    return img.path
