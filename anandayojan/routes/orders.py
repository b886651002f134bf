# anandayojan/routes/orders.py
from fastapi import APIRouter, Depends, status

from ..dependencies import get_order_manager
from ..errors import Rejection, rejection_to_http
from ..models.order import OrderCreate, OrderCreateResponse, OrderList
from ..orders import OrderManager
from ..utils.auth import get_current_user

orders_router = APIRouter(prefix="/orders", tags=["Orders"])


@orders_router.post("", response_model=OrderCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order: OrderCreate,
    current_user: dict = Depends(get_current_user),
    manager: OrderManager = Depends(get_order_manager)
):
    result = await manager.create_order(
        order,
        current_user["id"],
        current_user["name"],
        current_user["email"]
    )
    if isinstance(result, Rejection):
        raise rejection_to_http(result)

    return OrderCreateResponse(
        order_id=result.order.id,
        order=result.order,
        razorpay_order=result.gateway_order
    )


@orders_router.get("", response_model=OrderList)
async def list_my_orders(
    current_user: dict = Depends(get_current_user),
    manager: OrderManager = Depends(get_order_manager)
):
    return OrderList(orders=await manager.list_orders(current_user["id"]))
