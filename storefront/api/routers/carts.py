# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.store import MemoryStore, get_store
from storefront.domain.schemas import CartItemIn, QuantityIn

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("/{email}")
def get_cart(email: str, store: MemoryStore = Depends(get_store)):
    cart = store.carts.get(email, {})
    return {"items": [{"productId": pid, "quantity": qty} for pid, qty in cart.items()]}


@router.post("/{email}", status_code=201)
def add_item(email: str, payload: CartItemIn, store: MemoryStore = Depends(get_store)):
    if payload.product_id not in store.products:
        raise HTTPException(status_code=404, detail="Product not found")

    with store.lock:
        cart = store.carts.setdefault(email, {})
        cart[payload.product_id] = cart.get(payload.product_id, 0) + payload.quantity
        quantity = cart[payload.product_id]
    return {"productId": payload.product_id, "quantity": quantity}


@router.patch("/{email}/{product_id}")
def update_item(
    email: str,
    product_id: str,
    payload: QuantityIn,
    store: MemoryStore = Depends(get_store),
):
    with store.lock:
        cart = store.carts.get(email, {})
        if product_id not in cart:
            raise HTTPException(status_code=404, detail="Item not in cart")
        cart[product_id] = payload.quantity
    return {"productId": product_id, "quantity": payload.quantity}


@router.delete("/{email}/{product_id}", status_code=204)
def remove_item(email: str, product_id: str, store: MemoryStore = Depends(get_store)):
    with store.lock:
        cart = store.carts.get(email, {})
        if product_id not in cart:
            raise HTTPException(status_code=404, detail="Item not in cart")
        del cart[product_id]
    return Response(status_code=204)


@router.delete("/{email}", status_code=204)
def clear_cart(email: str, store: MemoryStore = Depends(get_store)):
    with store.lock:
        store.carts.pop(email, None)
    return Response(status_code=204)
