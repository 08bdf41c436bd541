"""
Media API Endpoints
Image uploads to Supabase Storage (product photos, banners, logos)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.core.auth import TokenUser, require_admin
from app.core.exceptions import DarkStoreError
from app.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/media", tags=["Media"])


@router.post("/upload", status_code=201)
async def upload_image(
    file: UploadFile = File(...),
    folder: Optional[str] = Form(None, description="Subfolder inside the bucket (products, banners...)"),
    user: TokenUser = Depends(require_admin)
):
    """
    Upload an image and return its public URL

    Accepted: jpg, jpeg, png, webp, gif, svg, avif (max 5 MB)
    """
    try:
        content = await file.read()
        url = StorageService().upload_image(
            filename=file.filename or "upload",
            content=content,
            content_type=file.content_type,
            subfolder=folder,
        )
        return {"status": "success", "data": {"url": url}}

    except DarkStoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Upload failed for {file.filename}: {e}")
        raise HTTPException(status_code=500, detail=f"Error uploading image: {str(e)}")
