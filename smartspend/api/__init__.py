"""HTTP API package."""

from smartspend.api.app import AnalyzeRequest, UploadedFile, app, get_extractor

__all__ = ["AnalyzeRequest", "UploadedFile", "app", "get_extractor"]
