"""
Image downloader handler package.

Exports the edit trigger handler, its event model and the downloader.
"""
from handlers.downloader.events import EditEvent
from handlers.downloader.handler import EditTriggerHandler, EditOutcome, candidate_rows
from handlers.downloader.image_downloader import ImageDownloader, SavedImage

__all__ = [
    "EditEvent",
    "EditTriggerHandler",
    "EditOutcome",
    "candidate_rows",
    "ImageDownloader",
    "SavedImage",
]
