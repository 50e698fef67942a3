from .base import DEFAULT_PAGE_SIZE, PhotoSource, PhotoSourceError
from .picsum import PicsumPhotoSource

__all__ = ["DEFAULT_PAGE_SIZE", "PhotoSource", "PhotoSourceError", "PicsumPhotoSource"]
