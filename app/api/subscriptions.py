"""
app/api/subscriptions.py

Purpose: Subscription plan endpoints
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_subscription_service
from app.schemas.subscriptions import SubscriptionUpdateRequest
from app.services.subscription_service import SubscriptionService

router = APIRouter()


@router.get("/subscriptions")
async def list_plans(plans: SubscriptionService = Depends(get_subscription_service)):
    return {"subscriptions": [plan.to_api() for plan in await plans.list_plans()]}


@router.patch("/subscriptions/{plan_id}")
async def update_plan(
    plan_id: str,
    payload: SubscriptionUpdateRequest,
    plans: SubscriptionService = Depends(get_subscription_service),
):
    plan = await plans.update_plan(plan_id, price=payload.price, days=payload.subscription_days)
    return {"success": True, "subscription": plan.to_api()}
