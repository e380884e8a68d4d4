"""
app/services/gym_service.py

Purpose: Gym management

- Gym CRUD
- Access code (QR) generation and caching
- Operating hours (unified / per-gender edits)
- Gym image storage in GridFS
"""

import uuid
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from gridfs.errors import NoFile

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.db.mongo import document_filter
from app.models.base import parse_documents
from app.models.gym import Gym, OperatingHours, hours_document
from utils.qr_utils import generate_gym_access_code
from utils.time_utils import utc_now

logger = get_logger(__name__)

IMAGE_SLOTS = (1, 2)
IMAGE_CONTENT_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
MAX_IMAGE_BYTES = 5 * 1024 * 1024


class GymService:
    """Service for gym documents and their assets"""

    def __init__(self, gyms, images_bucket=None, files_prefix: Optional[str] = None):
        self.gyms = gyms
        self.images_bucket = images_bucket
        self.files_prefix = files_prefix if files_prefix is not None else f"{settings.API_PREFIX}/files"

    async def list_gyms(self) -> List[Gym]:
        documents = await self.gyms.find({}).sort("name", 1).to_list(length=None)
        return parse_documents(Gym, documents)

    async def get_gym(self, gym_id: str) -> Gym:
        document = await self.gyms.find_one(document_filter(gym_id))
        if not document:
            raise ResourceNotFoundError("Gym not found")
        return Gym.from_document(document)

    async def _set_fields(self, gym_id: str, fields: Dict[str, Any]):
        result = await self.gyms.update_one(
            document_filter(gym_id),
            {"$set": {**fields, "updatedAt": utc_now()}}
        )
        if result.matched_count == 0:
            raise ResourceNotFoundError("Gym not found")

    async def create_gym(self, fields: Dict[str, Any]) -> Gym:
        """
        Stores a new gym, then generates and stores its access code.

        Args:
            fields: Gym fields by stored name

        A failure to generate the access code is logged and leaves the gym
        without one; it can be generated later.
        """
        gym_id = uuid.uuid4().hex
        hours = OperatingHours.model_validate(fields.get("operatingHours") or {}).synchronized()
        now = utc_now()
        document = {
            **fields,
            "_id": gym_id,
            "gymID": gym_id,
            "operatingHours": hours_document(hours),
            "qrCodeUrl": "",
            "createdAt": now,
            "updatedAt": now,
        }

        with LogContext(gym_id=gym_id):
            await self.gyms.insert_one(document)
            logger.info("Gym created")

            try:
                access_code = generate_gym_access_code(gym_id)
                await self._set_fields(gym_id, {"qrCodeUrl": access_code})
            except (ValueError, OSError) as e:
                logger.error(f"Failed to generate access code for new gym: {e}")

        return await self.get_gym(gym_id)

    async def update_gym(self, gym_id: str, changes: Dict[str, Any]) -> Gym:
        if not changes:
            raise ValidationError("No changes provided")
        if "operatingHours" in changes:
            hours = OperatingHours.model_validate(changes["operatingHours"]).synchronized()
            changes = {**changes, "operatingHours": hours_document(hours)}

        await self._set_fields(gym_id, changes)
        logger.info(f"Gym updated: {', '.join(sorted(changes))}", extra={"gym_id": gym_id})
        return await self.get_gym(gym_id)

    async def delete_gym(self, gym_id: str):
        result = await self.gyms.delete_one(document_filter(gym_id))
        if result.deleted_count == 0:
            raise ResourceNotFoundError("Gym not found")
        logger.info("Gym deleted", extra={"gym_id": gym_id})

    async def get_access_code(self, gym_id: str) -> str:
        """Cached access code, generated and stored on first request."""
        gym = await self.get_gym(gym_id)
        if gym.qr_code_url:
            return gym.qr_code_url
        return await self.regenerate_access_code(gym_id)

    async def regenerate_access_code(self, gym_id: str) -> str:
        """Generates the access code and overwrites the stored one."""
        gym = await self.get_gym(gym_id)
        access_code = generate_gym_access_code(gym.gym_id or gym.id)
        await self._set_fields(gym_id, {"qrCodeUrl": access_code})
        logger.info("Access code stored", extra={"gym_id": gym_id})
        return access_code

    async def set_unified(self, gym_id: str, unified: bool) -> OperatingHours:
        gym = await self.get_gym(gym_id)
        hours = gym.hours().set_unified(unified)
        await self._set_fields(gym_id, {"operatingHours": hours_document(hours)})
        return hours

    async def edit_hours(
        self,
        gym_id: str,
        gender: str,
        day: str,
        field: str,
        value: Any,
    ) -> OperatingHours:
        """
        Edits one field of one day and stores the resulting schedule.

        Raises:
            ValidationError: Unknown day/field or malformed value
        """
        gym = await self.get_gym(gym_id)
        try:
            hours = gym.hours().edit_day(gender, day, field, value)
        except ValueError as e:
            raise ValidationError(str(e))

        await self._set_fields(gym_id, {"operatingHours": hours_document(hours)})
        return hours

    async def upload_image(
        self,
        gym_id: str,
        slot: int,
        filename: str,
        content_type: str,
        data: bytes,
    ) -> str:
        """
        Stores a gym image and points the gym's image slot at it.

        The previous image in the same slot is replaced once the new one
        is stored and linked; a failed upload leaves it in place.

        Returns:
            URL the image is served from
        """
        if slot not in IMAGE_SLOTS:
            raise ValidationError(f"Image slot must be one of {IMAGE_SLOTS}")
        if content_type not in IMAGE_CONTENT_TYPES:
            raise ValidationError(f"Unsupported image type: {content_type}")
        if not data:
            raise ValidationError("Image file is empty")
        if len(data) > MAX_IMAGE_BYTES:
            raise ValidationError("Image file is too large")

        await self.get_gym(gym_id)
        storage_name = f"gyms/{gym_id}/image{slot}"

        with LogContext(gym_id=gym_id):
            previous_ids = [previous._id async for previous in self.images_bucket.find({"filename": storage_name})]

            file_id = await self.images_bucket.upload_from_stream(
                storage_name,
                data,
                metadata={"contentType": content_type, "originalName": filename, "gymID": gym_id},
            )
            url = f"{self.files_prefix}/{file_id}"
            await self._set_fields(gym_id, {f"imageUrl{slot}": url})

            # Old files go only once the gym points at the new one
            for previous_id in previous_ids:
                await self.images_bucket.delete(previous_id)
            logger.info(f"Image stored in slot {slot}")

        return url

    async def open_image(self, file_id: str) -> Tuple[bytes, str]:
        """
        Returns:
            (content, content type)
        """
        if not ObjectId.is_valid(file_id):
            raise ResourceNotFoundError("File not found")
        try:
            stream = await self.images_bucket.open_download_stream(ObjectId(file_id))
        except NoFile:
            raise ResourceNotFoundError("File not found")

        content = await stream.read()
        metadata = stream.metadata or {}
        return content, metadata.get("contentType", "application/octet-stream")
