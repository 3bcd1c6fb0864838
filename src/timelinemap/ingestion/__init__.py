"""Event ingestion: submission validation, uploads, geocoding and persistence."""

from __future__ import annotations

from .pipeline import EventIngestionPipeline, split_list
from .uploads import ImageUpload, UploadStorage

__all__ = ["EventIngestionPipeline", "ImageUpload", "UploadStorage", "split_list"]
