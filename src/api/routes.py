"""Menu bulk upload routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from src.models.restaurant import Restaurant
from src.services import bulk_upload_service, menu_template_service
from src.services.exceptions import ServiceError
from src.utils.config import get_config
from src.utils.constants import TEMPLATE_FILENAME, XLSX_MIME_TYPE
from src.utils.validators import parse_bool

from .dependencies import get_current_restaurant
from .responses import (
    BULK_UPLOAD_SERVER_ERROR,
    NO_FILE_MESSAGE,
    TEMPLATE_SERVER_ERROR,
    error_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu", tags=["menu"])


@router.post("/bulk-upload")
async def bulk_upload(
    file: Optional[UploadFile] = File(None),
    updateExisting: str = Form("false"),
    restaurant: Restaurant = Depends(get_current_restaurant),
):
    """Import categories, tags and menu items from an XLSX or CSV file."""
    if file is None:
        return error_response(400, NO_FILE_MESSAGE)

    update_existing = bool(parse_bool(updateExisting))

    try:
        # One byte past the limit is enough for the size check to reject it
        content = await file.read(get_config().max_upload_bytes + 1)
        result = await run_in_threadpool(
            bulk_upload_service.run_bulk_upload,
            content,
            file.filename,
            file.content_type,
            restaurant.id,
            update_existing,
        )
    except ServiceError:
        raise
    except Exception:
        logger.exception(f"Bulk upload failed for restaurant {restaurant.id}")
        return error_response(500, BULK_UPLOAD_SERVER_ERROR)

    return {"success": True, "message": "Bulk upload completed", "data": result.to_dict()}


@router.get("/bulk-upload/template")
async def download_template(restaurant: Restaurant = Depends(get_current_restaurant)):
    """Download an XLSX template seeded with the restaurant's current menu."""
    try:
        content = await run_in_threadpool(menu_template_service.generate_template, restaurant.id)
    except ServiceError:
        raise
    except Exception:
        logger.exception(f"Template generation failed for restaurant {restaurant.id}")
        return error_response(500, TEMPLATE_SERVER_ERROR)

    return Response(
        content=content,
        media_type=XLSX_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )
