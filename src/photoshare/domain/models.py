from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

PICSUM_BASE_URL = "https://picsum.photos"
DEFAULT_IMAGE_SIZE = 600
THUMBNAIL_SIZE = 300
FULL_SIZE = 1200


class PhotoRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    author: str = "Anonymous"
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    download_url: str = Field(
        default="",
        validation_alias=AliasChoices("download_url", "downloadUrl"),
    )
    url: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, value: object) -> str:
        # Picsum ids are numeric strings, but be lenient about bare ints.
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise ValueError("photo id must be a string")
        text = value.strip()
        if not text:
            raise ValueError("photo id must not be empty")
        return text

    @field_validator("author", mode="before")
    @classmethod
    def validate_author(cls, value: object) -> object:
        if value is None:
            return "Anonymous"
        return value

    @field_validator("download_url", "url", mode="before")
    @classmethod
    def validate_optional_url(cls, value: object) -> object:
        if value is None:
            return ""
        return value

    def resolve_image_url(
        self,
        requested_width: int = DEFAULT_IMAGE_SIZE,
        requested_height: int = DEFAULT_IMAGE_SIZE,
        *,
        base_url: str = PICSUM_BASE_URL,
    ) -> str:
        """Return the URL the image loader should fetch for this photo.

        Remote photos are served through the resize endpoint, photos that only
        carry a plain ``url`` are returned as-is and anything else falls back to
        a random placeholder keyed by the photo id.
        """
        if self.download_url:
            return f"{base_url}/id/{self.id}/{requested_width}/{requested_height}"
        if self.url:
            return self.url
        return f"{base_url}/{requested_width}/{requested_height}?random={self.id}"

    def thumbnail_url(self, *, base_url: str = PICSUM_BASE_URL) -> str:
        return self.resolve_image_url(THUMBNAIL_SIZE, THUMBNAIL_SIZE, base_url=base_url)

    def full_size_url(self, *, base_url: str = PICSUM_BASE_URL) -> str:
        return self.resolve_image_url(FULL_SIZE, FULL_SIZE, base_url=base_url)


class GalleryState(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    photos: tuple[PhotoRecord, ...] = ()
    is_loading: bool = False
    error: str | None = None
    selected_photo: PhotoRecord | None = None
