"""
Blob storage for uploaded images.

Posts and avatars only keep the URL a blob store hands back; the store owns
the bytes. ``LocalBlobStore`` writes under ``MEDIA_ROOT`` and the app serves
that directory at ``MEDIA_URL``.
"""

import logging
import mimetypes
import os
from typing import Optional

from fastapi import HTTPException, UploadFile, status

from .config import settings
from .database import new_id
from .errors import field_error, invalid_input

logger = logging.getLogger(__name__)


class BlobStore:
    """interface the routers talk to"""

    def save(self, data: bytes, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def delete(self, url: str) -> bool:
        raise NotImplementedError



class LocalBlobStore(BlobStore):

    def __init__(self, root: str, base_url: str):
        self.root = os.path.abspath(root)
        self.base_url = base_url.rstrip("/")


    def path_for(self, url: str) -> Optional[str]:
        """filesystem path behind a URL this store produced, else None"""
        prefix = self.base_url + "/"
        if not url or not url.startswith(prefix):
            return None
        name = url[len(prefix):]
        if not name or "/" in name or name.startswith("."):
            return None
        return os.path.join(self.root, name)


    def save(self, data: bytes, filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
        extension = os.path.splitext(filename or "")[1].lower()
        if not extension and content_type:
            extension = mimetypes.guess_extension(content_type) or ""

        name = f"{new_id()}{extension}"
        os.makedirs(self.root, exist_ok=True)
        with open(os.path.join(self.root, name), "wb") as fh:
            fh.write(data)

        url = f"{self.base_url}/{name}"
        logger.info("Stored blob %s (%d bytes)", url, len(data))
        return url


    def delete(self, url: str) -> bool:
        path = self.path_for(url)
        if path is None or not os.path.exists(path):
            logger.warning("Blob %s not found in %s", url, self.root)
            return False
        os.remove(path)
        logger.info("Removed blob %s", url)
        return True



async def read_image_upload(upload: Optional[UploadFile], field: str) -> Optional[bytes]:
    """bytes of an uploaded image, None when nothing was attached"""
    if upload is None or not upload.filename:
        return None

    data = await upload.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large ({settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB max)"
        )

    if not (upload.content_type or "").startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=invalid_input({field: field_error("File must be an image", upload.filename)})
        )
    return data



blob_store = LocalBlobStore(settings.MEDIA_ROOT, settings.MEDIA_URL)


def get_blob_store() -> BlobStore:
    return blob_store
