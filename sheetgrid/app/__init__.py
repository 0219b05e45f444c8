"""
App layer: FastAPI 다운로드 응답.
"""

from .responses import content_disposition, get_mime_type, send

__all__ = ["send", "content_disposition", "get_mime_type"]
