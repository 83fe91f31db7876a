import os
import aiofiles
from fastapi import UploadFile
from ruralcare.config import get_settings
from ruralcare.services.identifier_service import time_tokens

settings = get_settings()

PUBLIC_PREFIX = "uploads"


class UploadService:
    async def save(self, file: UploadFile) -> tuple[str, bytes]:
        """Write the upload to disk as <millis>-<name>. Returns (public url, content)."""
        os.makedirs(settings.upload_dir, exist_ok=True)
        original = os.path.basename(file.filename or "") or "upload"
        stored_name = f"{time_tokens.next('')}-{original}"
        file_path = os.path.join(settings.upload_dir, stored_name)

        content = await file.read()
        async with aiofiles.open(file_path, "wb") as f:
            await f.write(content)

        return f"{PUBLIC_PREFIX}/{stored_name}", content


upload_service = UploadService()
