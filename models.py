from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


DEVICE_VIEWPORTS = {
    "desktop": {"width": 1920, "height": 1080},
    "tablet": {"width": 768, "height": 1024},
    "mobile": {"width": 375, "height": 667},
}


# Models
class Viewport(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class CaptureRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None  # Checked by the route so a missing URL answers 400
    password: Optional[str] = None
    full_page: bool = Field(default=True, alias="fullPage")
    viewport: Optional[Viewport] = None
    device: Optional[Literal["desktop", "tablet", "mobile"]] = None

    def resolve_viewport(self, default: dict) -> dict:
        """Explicit viewport wins over the device preset, which wins over the default"""
        if self.viewport is not None:
            return {"width": self.viewport.width, "height": self.viewport.height}
        if self.device is not None:
            return dict(DEVICE_VIEWPORTS[self.device])
        return dict(default)


class CaptureResult(BaseModel):
    success: bool = True
    image_data: str
    size_bytes: int
    width: int
    height: int
    original_url: str
    normalized_url: str
    timestamp: str

    @property
    def size_label(self) -> str:
        return f"{round(self.size_bytes / 1024)} KB"


class CaptureResponse(BaseModel):
    success: bool
    imageData: str
    originalUrl: str
    cleanedUrl: str
    timestamp: str
    size: str

    @classmethod
    def from_result(cls, result: CaptureResult) -> "CaptureResponse":
        return cls(
            success=result.success,
            imageData=result.image_data,
            originalUrl=result.original_url,
            cleanedUrl=result.normalized_url,
            timestamp=result.timestamp,
            size=result.size_label,
        )


class UrlTestResponse(BaseModel):
    success: bool
    message: str
    originalUrl: str
    cleanedUrl: str
    timestamp: str
    note: str
