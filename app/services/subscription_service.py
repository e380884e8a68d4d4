"""
app/services/subscription_service.py

Purpose: Subscription plan pricing and duration
"""

from typing import List, Optional

from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.mongo import document_filter
from app.models.base import parse_documents
from app.models.subscription import SubscriptionPlan
from utils.validation_utils import validate_duration_days, validate_price

logger = get_logger(__name__)


class SubscriptionService:

    def __init__(self, subscriptions):
        self.subscriptions = subscriptions

    async def list_plans(self) -> List[SubscriptionPlan]:
        documents = await self.subscriptions.find({}).to_list(length=None)
        return parse_documents(SubscriptionPlan, documents)

    async def update_plan(
        self,
        plan_id: str,
        price: Optional[str] = None,
        days: Optional[str] = None,
    ) -> SubscriptionPlan:
        """
        Updates a plan's price and/or duration (both stored as strings).

        Raises:
            ValidationError: Nothing to change, negative price or non-positive days
            ResourceNotFoundError: Unknown plan
        """
        changes = {}
        if price is not None:
            if not validate_price(price):
                raise ValidationError("Price must be a non-negative number")
            changes["price"] = price.strip()
        if days is not None:
            if not validate_duration_days(days):
                raise ValidationError("SubscriptionDays must be a positive whole number")
            changes["SubscriptionDays"] = days.strip()
        if not changes:
            raise ValidationError("No changes provided")

        result = await self.subscriptions.update_one(document_filter(plan_id), {"$set": changes})
        if result.matched_count == 0:
            raise ResourceNotFoundError("Subscription plan not found")

        logger.info(f"Subscription plan {plan_id} updated: {', '.join(sorted(changes))}")
        document = await self.subscriptions.find_one(document_filter(plan_id))
        return SubscriptionPlan.from_document(document)
