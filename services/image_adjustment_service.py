from __future__ import annotations

import logging

from models.errors import UnsupportedAdjustmentError
from models.image import Image
from models.image_adjustments import Adjustment, AdjustmentType, adjust_pixel_brightness
from models.pass_report import PassReport
from services.bounded_parallel_map import BoundedParallelMap
from services.resource_limit_service import ResourceLimitService

logger = logging.getLogger(__name__)


class ImageAdjustmentService:
    """
    Applies an Adjustment to an Image in place.
    *   No I/O here. Works only with Image objects.
    *   Concurrency budget comes from ResourceLimitService unless given.
    """

    def __init__(self,
                 budget: int = None,
                 *,
                 resource_limit_service: ResourceLimitService = None,
                 max_workers: int = None,
                 show_progress: bool = None):
        if budget is None:
            budget = (resource_limit_service or ResourceLimitService()).discover_limit()
        self.engine = BoundedParallelMap(budget, max_workers=max_workers, show_progress=show_progress)

    @staticmethod
    def check_supported(adjustment: Adjustment) -> None:
        if adjustment.kind is AdjustmentType.CONTRAST:
            raise UnsupportedAdjustmentError("contrast adjustment is not implemented yet")

    def apply(self, img: Image, adjustment: Adjustment) -> PassReport:
        self.check_supported(adjustment)

        logger.info(f"Applying brightness x{float(adjustment.factor):g} to {img.path or 'in-memory image'}")
        return self.engine.apply(img.grid, adjust_pixel_brightness, adjustment.factor)
