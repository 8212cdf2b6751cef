# storefront/services/cart_service.py
from concurrent.futures import Future
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from storefront.domain.schemas import CartLine, Product
from storefront.services.reconciler import ALL_KEY, Reconciler, _resolved
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def as_product(product: Product | BaseModel | Dict[str, Any]) -> Optional[Product]:
    """Product z modelu albo dicta; None (z warningiem) jak brakuje id albo pola sa zle."""
    if isinstance(product, BaseModel):
        product = product.model_dump()
    try:
        return Product.model_validate(product)
    except ValueError as e:
        logger.warning(f"Rejecting invalid product snapshot: {e}")
        return None


class CartService(Reconciler[CartLine]):
    """
    Koszyk zalogowanego uzytkownika.
    Komendy (add, remove, update, clear) ida optymistycznie i zwracaja Future[bool],
    query (total, count, is_in_cart) czytaja tylko lokalny stan.
    """

    kind = "cart"
    line_model = CartLine

    # query
    @property
    def cart(self) -> List[CartLine]:
        return self.items

    def get_cart_total(self) -> float:
        return sum(line.price * line.quantity for line in self.items)

    def get_cart_items_count(self) -> int:
        return sum(line.quantity for line in self.items)

    def is_in_cart(self, product_id: str) -> bool:
        return self.contains(product_id)

    def fetch_cart(self) -> bool:
        return self.fetch()

    def _load(self, email: str) -> List[CartLine]:
        refs = self.client.get_cart(email)

        lines: List[CartLine] = []
        positions: Dict[str, int] = {}
        for ref in refs:
            if ref.quantity < 1:
                logger.warning(f"Skipping cart line {ref.product_id} with quantity {ref.quantity}")
                continue

            # serwer nie powinien dublowac pozycji, ale jak to zrobi to sumujemy
            if ref.product_id in positions:
                i = positions[ref.product_id]
                lines[i] = lines[i].model_copy(update={"quantity": lines[i].quantity + ref.quantity})
                continue

            record = self.client.get_product(ref.product_id)
            if not isinstance(record, dict):
                raise ValueError(f"Unexpected product payload for {ref.product_id}")

            positions[ref.product_id] = len(lines)
            lines.append(
                CartLine.model_validate(
                    {**record, "productId": ref.product_id, "quantity": ref.quantity}
                )
            )

        logger.info(f"Loaded cart for {email}: {len(lines)} line(s)")
        return lines

    # commands
    def add_to_cart(self, product: Product | BaseModel | Dict[str, Any]) -> Future:
        product = as_product(product)
        if product is None:
            return _resolved(False)
        product_id = product.product_id

        def apply(items: List[CartLine]):
            for i, line in enumerate(items):
                if line.product_id == product_id:
                    items[i] = line.model_copy(update={"quantity": line.quantity + 1})
                    return items
            items.append(CartLine.model_validate({**product.model_dump(), "quantity": 1}))
            return items

        def remote(email: str) -> None:
            self.client.add_cart_item(email, product_id, 1)

        return self._mutate(product_id, "add", apply, remote)

    def remove_from_cart(self, product_id: str) -> Future:
        def apply(items: List[CartLine]):
            remaining = [line for line in items if line.product_id != product_id]
            if len(remaining) == len(items):
                return None
            return remaining

        def remote(email: str) -> None:
            self.client.remove_cart_item(email, product_id)

        return self._mutate(product_id, "remove", apply, remote)

    def update_quantity(self, product_id: str, quantity: int) -> Future:
        quantity = int(quantity)
        if quantity <= 0:
            return self.remove_from_cart(product_id)

        def apply(items: List[CartLine]):
            for i, line in enumerate(items):
                if line.product_id == product_id:
                    if line.quantity == quantity:
                        return None
                    items[i] = line.model_copy(update={"quantity": quantity})
                    return items
            logger.warning(f"update_quantity: {product_id} is not in the cart")
            return None

        def remote(email: str) -> None:
            self.client.update_cart_item(email, product_id, quantity)

        return self._mutate(product_id, "update", apply, remote)

    def clear_cart(self) -> Future:
        def remote(email: str) -> None:
            self.client.clear_cart(email)

        return self._mutate(ALL_KEY, "clear", lambda items: [], remote)
