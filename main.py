#!/usr/bin/env python3
"""
Brightness Adjuster CLI

    brightness-adjust <adjustType> <adjustAmountPercent> <imagePath>

adjustType is "brightness" or "contrast" (contrast is not implemented yet).
An amount of N percent scales channels by 1 + N/100.
"""

import argparse
import logging
import os
import sys
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from models.errors import BrightnessAdjusterError, InvalidArgumentError, UnsupportedAdjustmentError
from models.image_adjustments import Adjustment
from pipeline.brightness_adjuster import adjust_image_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="brightness-adjust",
        description="Adjust the brightness of an image using a bounded pool of pixel workers.",
    )
    p.add_argument("adjust_type", metavar="adjustType", help='"brightness" or "contrast"')
    p.add_argument("adjust_amount", metavar="adjustAmountPercent",
                   help="integer percentage, e.g. 25 for +25%%")
    p.add_argument("image_path", metavar="imagePath", help="image file, relative to the working directory")
    return p


def main(argv=None) -> int:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        adjustment = Adjustment.parse(args.adjust_type, args.adjust_amount)
        logger.info(f"adjustment type = {adjustment.kind.value}")
        logger.info(f"adjustment amount = {adjustment.amount_percent}%")
        logger.info(f"image = {args.image_path}")

        adjust_image_file(args.image_path, adjustment)
    except BrightnessAdjusterError as err:
        # contrast is a valid mode, just not implemented: no usage hint
        if isinstance(err, InvalidArgumentError) and not isinstance(err, UnsupportedAdjustmentError):
            parser.print_usage(sys.stderr)
        print(f"Error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
