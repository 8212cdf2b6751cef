# storefront/services/order_service.py
from concurrent.futures import Future
from typing import List, Tuple

from storefront.domain.schemas import OrderCreate, OrderLine, OrderOut
from storefront.services.api_client import StorefrontClient
from storefront.services.cart_service import CartService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Checkout z koszyka.
    Tu nie ma optymizmu - zamowienie musi potwierdzic serwer, bledy HTTP leca wyzej.
    """

    def __init__(self, cart: CartService, client: StorefrontClient | None = None):
        self.cart = cart
        self.client = client or cart.client

    def _email(self) -> str:
        email = self.cart.identity.email
        if email is None:
            raise PermissionError("Sign in to place or view orders")
        return email

    def place_order(self) -> Tuple[OrderOut, Future]:
        """
        Use Case: Zamowienie z aktualnego koszyka.

        1. Sprawdza usera i czy koszyk nie jest pusty
        2. Wysyla pozycje + total
        3. Czysci koszyk (optymistycznie, Future jak przy innych mutacjach)
        """
        email = self._email()
        lines = self.cart.items
        if not lines:
            raise ValueError("Cannot place an order with an empty cart")

        payload = OrderCreate(
            buyer_email=email,
            items=[
                OrderLine(
                    product_id=line.product_id,
                    title=line.title,
                    price=line.price,
                    quantity=line.quantity,
                    seller_email=line.seller_email,
                )
                for line in lines
            ],
            total=sum(line.price * line.quantity for line in lines),
        )

        data = self.client.create_order(payload.model_dump(by_alias=True))
        order = OrderOut.model_validate(data)
        logger.info(f"Order {order.id} placed by {email}, total {order.total}")

        return order, self.cart.clear_cart()

    def list_orders(self) -> List[OrderOut]:
        email = self._email()
        return [OrderOut.model_validate(raw) for raw in self.client.list_orders(email)]
