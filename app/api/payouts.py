"""
app/api/payouts.py

Purpose: Gym payout request endpoints

- List and count requests
- Approve / reject with the admin's identity recorded
- Live Server-Sent Events stream of full snapshots
"""

import json
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from app.api.deps import get_payout_service
from app.core.config import settings
from app.core.logging import get_logger
from app.core.session import AdminSession, require_admin
from app.services.payout_service import PayoutService

logger = get_logger(__name__)
router = APIRouter()


@router.get("/payout-requests")
async def list_requests(
    status: Optional[str] = None,
    payouts: PayoutService = Depends(get_payout_service),
):
    """Requests newest first, optionally limited to one status."""
    requests = await payouts.list_requests(status)
    return {"requests": [request.to_api() for request in requests]}


@router.get("/payout-requests/pending-count")
async def pending_count(payouts: PayoutService = Depends(get_payout_service)):
    return {"pendingCount": await payouts.pending_count()}


@router.get("/payout-requests/stream")
async def stream_requests(
    request: Request,
    status: Optional[str] = None,
    payouts: PayoutService = Depends(get_payout_service),
):
    """
    Server-Sent Events stream.

    Every event carries the full ``{requests, pendingCount}`` snapshot; one is
    sent on connect and another whenever it changes.
    """
    async def events():
        logger.info("Payout stream opened")
        async for snapshot in payouts.watch(
            status=status,
            interval=settings.PAYOUT_STREAM_INTERVAL,
            is_disconnected=request.is_disconnected,
        ):
            yield f"data: {json.dumps(snapshot)}\n\n"

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


@router.post("/payout-requests/{request_id}/approve")
async def approve_request(
    request_id: str,
    payouts: PayoutService = Depends(get_payout_service),
    session: AdminSession = Depends(require_admin),
):
    payout = await payouts.approve(request_id, session.identity)
    return {"success": True, "request": payout.to_api()}


@router.post("/payout-requests/{request_id}/reject")
async def reject_request(
    request_id: str,
    payouts: PayoutService = Depends(get_payout_service),
    session: AdminSession = Depends(require_admin),
):
    payout = await payouts.reject(request_id, session.identity)
    return {"success": True, "request": payout.to_api()}
