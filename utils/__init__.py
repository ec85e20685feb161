# Utils package - capture pipeline steps
# Import from submodules for convenience

from .url_normalizer import normalize_url
from .image_processor import encode_png_data_uri
from .content_sanitizer import sanitize_page, build_sanitizer_css

__all__ = [
    "normalize_url",
    "encode_png_data_uri",
    "sanitize_page",
    "build_sanitizer_css",
]
