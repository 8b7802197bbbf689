"""Generic image upload (farmer photos, extension thumbnails, ...)."""

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.auth.deps import require_permission
from app.dependencies import get_services
from app.schemas.geo import UploadOut
from app.services.lifecycle import AppServices
from app.tenancy import OrganizationContext

router = APIRouter()


@router.post("/images", response_model=UploadOut, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    services: AppServices = Depends(get_services),
    ctx: OrganizationContext = Depends(require_permission("uploads.write")),
):
    data = await file.read()
    return await services.storage.upload_image(
        ctx.organization_id, file.filename, file.content_type, data
    )
