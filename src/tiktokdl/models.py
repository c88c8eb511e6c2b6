"""Domain models used across the application."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class ImageItem(BaseModel):
    """A single picture of a gallery post."""

    index: int = Field(..., ge=1, description="1-based position among resolved images")
    url: str


class VideoLinks(BaseModel):
    """Download links for the video variants offered by the extraction service."""

    nowm: Optional[str] = None
    nowm_hd: Optional[str] = None
    wm: Optional[str] = None


class ExtractionResult(BaseModel):
    """Normalized metadata extracted for one TikTok post."""

    title: Optional[str] = None
    cover: Optional[str] = None
    images: List[ImageItem] = Field(default_factory=list)
    videos: VideoLinks = Field(default_factory=VideoLinks)
    mp3: Optional[str] = None

    def is_empty(self) -> bool:
        """Return ``True`` when no video, audio or image link was found."""

        return not (
            self.videos.nowm
            or self.videos.nowm_hd
            or self.videos.wm
            or self.mp3
            or self.images
        )
