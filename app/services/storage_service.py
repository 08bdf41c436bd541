"""
Storage Service
Image uploads to Supabase Storage (products, banners, brand logos)
"""
import logging
import mimetypes
import secrets
import time
from typing import Optional

from app.core.config import settings
from app.core.database import get_supabase
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif", "svg", "avif"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def build_object_name(filename: str, subfolder: Optional[str] = None) -> str:
    """
    Unique object path keeping the original extension

    Example:
        build_object_name("whey.PNG", "products") -> "products/1718000000000-3f9a1c2b7d.png"
    """
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Formato de arquivo não suportado: .{extension or '?'}")

    prefix = f"{subfolder.strip('/')}/" if subfolder else ""
    return f"{prefix}{int(time.time() * 1000)}-{secrets.token_hex(5)}.{extension}"


class StorageService:
    def __init__(self, bucket: Optional[str] = None):
        self.bucket = bucket or settings.SUPABASE_STORAGE_BUCKET

    def upload_image(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        subfolder: Optional[str] = None
    ) -> str:
        """
        Upload an image and return its public URL

        Raises:
            ValidationError: unsupported extension, empty or oversized file
        """
        if not content:
            raise ValidationError("Arquivo vazio.")
        if len(content) > MAX_UPLOAD_BYTES:
            raise ValidationError("Arquivo maior que 5 MB.")

        object_name = build_object_name(filename, subfolder)
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"

        bucket = get_supabase().storage.from_(self.bucket)
        bucket.upload(object_name, content, {"content-type": content_type})
        public_url = bucket.get_public_url(object_name)

        logger.info(f"Uploaded {object_name} to bucket {self.bucket}")
        return public_url
