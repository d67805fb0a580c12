"""Image model wrapping downloaded icon bytes."""

from io import BytesIO

from PIL import Image as PILImage
from pydantic import BaseModel, Field


class Image(BaseModel):
    """Data model for Image contents and associated metadata."""

    content: bytes
    content_type: str = Field(
        default="image/unknown",
        description="Content type of the Image. Can be 'image/png', 'image/jpeg', 'image'",
    )

    def get_dimensions(self) -> tuple[int, int]:
        """Get image dimensions and properly close the file"""
        with PILImage.open(BytesIO(self.content)) as img:
            return img.size
