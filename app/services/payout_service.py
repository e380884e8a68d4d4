"""
app/services/payout_service.py

Purpose: Gym payout request review

- Newest-first listing, pending count
- Approve / reject (pending requests only)
- Live snapshots for the streaming endpoint
"""

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from app.core.exceptions import InvalidTransitionError, ResourceNotFoundError
from app.core.logging import get_logger
from app.db.mongo import document_filter
from app.models.base import parse_documents
from app.models.payout import GymPayoutRequest, is_valid_transition
from utils.constants import PAYOUT_APPROVED, PAYOUT_PENDING, PAYOUT_REJECTED
from utils.time_utils import to_iso, utc_now

logger = get_logger(__name__)


class PayoutService:

    def __init__(self, payout_requests):
        self.payout_requests = payout_requests

    async def list_requests(self, status: Optional[str] = None) -> List[GymPayoutRequest]:
        query = {"status": status} if status else {}
        documents = await self.payout_requests.find(query).sort("createdAt", -1).to_list(length=None)
        return parse_documents(GymPayoutRequest, documents)

    async def pending_count(self) -> int:
        return await self.payout_requests.count_documents({"status": PAYOUT_PENDING})

    async def approve(self, request_id: str, admin: str) -> GymPayoutRequest:
        return await self._transition(request_id, PAYOUT_APPROVED, {
            "approvedAt": to_iso(utc_now()),
            "approvedBy": admin,
        })

    async def reject(self, request_id: str, admin: str) -> GymPayoutRequest:
        return await self._transition(request_id, PAYOUT_REJECTED, {
            "rejectedAt": to_iso(utc_now()),
            "rejectedBy": admin,
        })

    async def _transition(self, request_id: str, target: str, audit: Dict[str, Any]) -> GymPayoutRequest:
        """
        Moves a pending request to ``target``.

        The write only applies while the stored status is still pending.

        Raises:
            ResourceNotFoundError: Unknown request
            InvalidTransitionError: Request is no longer pending
        """
        current = await self._get(request_id)
        if not is_valid_transition(current.status, target):
            raise self._invalid(current.status, target)

        result = await self.payout_requests.update_one(
            {**document_filter(request_id), "status": PAYOUT_PENDING},
            {"$set": {"status": target, **audit}}
        )
        request = await self._get(request_id)
        if result.modified_count == 0:
            raise self._invalid(request.status, target)

        logger.info(f"Payout request {request_id} {target}", extra={"gym_id": request.gym_id})
        return request

    async def _get(self, request_id: str) -> GymPayoutRequest:
        document = await self.payout_requests.find_one(document_filter(request_id))
        if not document:
            raise ResourceNotFoundError("Payout request not found")
        return GymPayoutRequest.from_document(document)

    @staticmethod
    def _invalid(current: str, target: str) -> InvalidTransitionError:
        return InvalidTransitionError(
            f"Cannot change payout request from {current} to {target}",
            details={"status": current},
        )

    async def snapshot(self, status: Optional[str] = None) -> Dict[str, Any]:
        """Full replacement state for live subscribers."""
        requests = await self.list_requests(status)
        return {
            "requests": [request.to_api() for request in requests],
            "pendingCount": await self.pending_count(),
        }

    async def watch(
        self,
        status: Optional[str] = None,
        interval: float = 2.0,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yields a snapshot on start and again whenever it changes.

        Stops once ``is_disconnected`` reports the subscriber has gone.
        """
        previous = None
        while True:
            if is_disconnected is not None and await is_disconnected():
                logger.info("Payout stream subscriber disconnected")
                break

            current = await self.snapshot(status)
            if current != previous:
                yield current
                previous = current

            await asyncio.sleep(interval)
