# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends

from storefront.api.store import MemoryStore, get_store
from storefront.domain.schemas import OrderCreate, OrderOut

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, store: MemoryStore = Depends(get_store)):
    """
    Zapisuje zamowienie tak jak przyszlo.
    Stany magazynowe i realizacja to sprawa prawdziwego backendu.
    """
    return store.new_order(payload.model_dump(by_alias=True))


@router.get("/{email}", response_model=List[OrderOut])
def list_orders(email: str, store: MemoryStore = Depends(get_store)):
    return [o for o in store.orders if o["buyerEmail"] == email]
