"""
Google Drive API client using google-api-python-client.
Stores downloaded images as files inside a Drive folder.
"""
import io
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload


class DriveClient:
    """Wrapper around the Drive v3 files resource."""

    def __init__(self, credentials: Any, service: Any = None):
        """
        Args:
            credentials: google-auth credentials with a Drive scope
            service: Prebuilt Drive service (tests inject a mock here)
        """
        self.service = service or build("drive", "v3", credentials=credentials, cache_discovery=False)

    def create_file(self, folder_id: str, name: str, content: bytes, mime_type: str) -> str:
        """
        Create a new file in a folder and return its file ID.
        Existing files with the same name are left untouched.
        """
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)
        created = self.service.files().create(
            body={"name": name, "parents": [folder_id]},
            media_body=media,
            fields="id",
            supportsAllDrives=True,
        ).execute()
        return created["id"]


# Singleton instance for the application
_drive_client: DriveClient | None = None


def get_drive_client() -> DriveClient:
    """
    Get the global DriveClient instance.
    Shares the service account credentials of the sheets client.
    """
    global _drive_client
    if _drive_client is None:
        from sheets_client import get_sheets_client
        _drive_client = DriveClient(get_sheets_client().credentials)
    return _drive_client


def reset_drive_client() -> None:
    """Reset the global client (useful for testing)."""
    global _drive_client
    _drive_client = None
