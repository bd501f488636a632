"""Order Repository - order creation from checkout."""
import json
from typing import TYPE_CHECKING

from .base import BaseRepository
from storefront.services.models import Order

if TYPE_CHECKING:
    from storefront.checkout import CreateOrderRequest


class OrderRepository(BaseRepository):
    """Writes ``orders``."""

    async def create(self, request: "CreateOrderRequest") -> Order:
        """Insert a pending order. Items and address are stored as JSON text."""
        payload = request.model_dump(mode="json")
        data = {
            "order_number": payload["order_number"],
            "customer_name": payload["customer"]["name"],
            "customer_email": payload["customer"]["email"],
            "customer_phone": payload["customer"]["phone"],
            "items": json.dumps(payload["items"]),
            "subtotal": payload["subtotal"],
            "tax": payload["tax"],
            "delivery_fee": payload["delivery_fee"],
            "total": payload["total"],
            "delivery_method": payload["delivery_method"],
            "delivery_time_slot": payload["delivery_time_slot"],
            "delivery_address": json.dumps(payload["delivery_address"]) if payload["delivery_address"] else None,
            "payment_id": payload["payment_id"],
            "payment_method": payload["payment_method"],
            "payment_status": "completed" if payload["payment_id"] else "pending",
            "status": "pending",
            "notes": payload["notes"],
        }

        result = await self.client.table("orders").insert(data).execute()
        if not result.data:
            raise ValueError("Order insert returned no rows")
        return Order(**result.data[0])
