from pathlib import Path
import cv2
from models.image import Image
from repositories.image_repository import ImageRepository


class ImageService:
    """I/O and codec helpers.  No pixel-transform logic."""
    def __init__(self, image_repository: ImageRepository = None):
        self.image_repository = image_repository or ImageRepository()

    def load(self, path: str | Path) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def save(self, image: Image) -> None:
        """
        Business-level method to save the image to its path.
        """
        self.image_repository.save(image)

    def get_image_dimensions(self, img: Image):
        return self.image_repository.retrieve_image_dimensions(img)

    @staticmethod
    def mean_brightness(img: Image) -> float:
        """
        Args:
            img (Image): An image object
        Returns:
            (float): Mean grayscale level in [0, 255], 0.0 for an empty grid.
        """
        if not len(img.grid):
            return 0.0
        grayscale_pixels = cv2.cvtColor(img.grid.to_array(), cv2.COLOR_RGBA2GRAY)
        return float(grayscale_pixels.mean())
