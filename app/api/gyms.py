"""
app/api/gyms.py

Purpose: Gym endpoints

- Gym CRUD
- Access code (QR) retrieval and regeneration
- Operating hours editing
- Image upload and serving
"""

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import Response

from app.api.deps import get_gym_service
from app.schemas.gyms import EditHoursRequest, GymCreateRequest, GymUpdateRequest, UnifiedHoursRequest
from app.services.gym_service import GymService

router = APIRouter()

# Image files are fetched by <img> tags, which cannot send the admin header
files_router = APIRouter()


@router.get("/gyms")
async def list_gyms(gyms: GymService = Depends(get_gym_service)):
    return {"gyms": [gym.to_api() for gym in await gyms.list_gyms()]}


@router.post("/gyms", status_code=status.HTTP_201_CREATED)
async def create_gym(payload: GymCreateRequest, gyms: GymService = Depends(get_gym_service)):
    """Creates a gym and generates its access code."""
    gym = await gyms.create_gym(payload.stored_fields())
    return {"success": True, "gym": gym.to_api()}


@router.get("/gyms/{gym_id}")
async def get_gym(gym_id: str, gyms: GymService = Depends(get_gym_service)):
    return (await gyms.get_gym(gym_id)).to_api()


@router.patch("/gyms/{gym_id}")
async def update_gym(
    gym_id: str,
    payload: GymUpdateRequest,
    gyms: GymService = Depends(get_gym_service),
):
    gym = await gyms.update_gym(gym_id, payload.stored_fields())
    return {"success": True, "gym": gym.to_api()}


@router.delete("/gyms/{gym_id}")
async def delete_gym(gym_id: str, gyms: GymService = Depends(get_gym_service)):
    await gyms.delete_gym(gym_id)
    return {"success": True, "message": "Gym deleted successfully"}


@router.get("/gyms/{gym_id}/qr-code")
async def get_access_code(gym_id: str, gyms: GymService = Depends(get_gym_service)):
    """Stored access code, generated on first request."""
    return {"gymId": gym_id, "qrCodeUrl": await gyms.get_access_code(gym_id)}


@router.post("/gyms/{gym_id}/qr-code")
async def regenerate_access_code(gym_id: str, gyms: GymService = Depends(get_gym_service)):
    return {"gymId": gym_id, "qrCodeUrl": await gyms.regenerate_access_code(gym_id)}


@router.post("/gyms/{gym_id}/operating-hours/unified")
async def set_unified_hours(
    gym_id: str,
    payload: UnifiedHoursRequest,
    gyms: GymService = Depends(get_gym_service),
):
    """Turning unified mode on copies the male schedule to the female one."""
    hours = await gyms.set_unified(gym_id, payload.unified)
    return {"success": True, "operatingHours": hours.model_dump()}


@router.post("/gyms/{gym_id}/operating-hours/edit")
async def edit_hours(
    gym_id: str,
    payload: EditHoursRequest,
    gyms: GymService = Depends(get_gym_service),
):
    hours = await gyms.edit_hours(gym_id, payload.gender, payload.day, payload.field, payload.value)
    return {"success": True, "operatingHours": hours.model_dump()}


@router.post("/gyms/{gym_id}/images/{slot}")
async def upload_image(
    gym_id: str,
    slot: int,
    file: UploadFile = File(...),
    gyms: GymService = Depends(get_gym_service),
):
    """Stores an image in slot 1 or 2 and returns its URL."""
    data = await file.read()
    url = await gyms.upload_image(gym_id, slot, file.filename or "", file.content_type or "", data)
    return {"success": True, "imageUrl": url}


@files_router.get("/files/{file_id}")
async def serve_file(file_id: str, gyms: GymService = Depends(get_gym_service)):
    content, content_type = await gyms.open_image(file_id)
    return Response(content=content, media_type=content_type)
