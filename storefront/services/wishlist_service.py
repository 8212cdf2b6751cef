# storefront/services/wishlist_service.py
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List

from pydantic import BaseModel

from storefront.domain.schemas import Product, WishlistEntry
from storefront.services.cart_service import as_product
from storefront.services.reconciler import (
    ALL_KEY,
    RECOVERABLE_ERRORS,
    BatchMutationError,
    Reconciler,
    _resolved,
)
from storefront.utils.settings import RECONCILER_WORKERS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class WishlistService(Reconciler[WishlistEntry]):
    """Zapisane produkty - to samo co koszyk, tylko bez ilosci."""

    kind = "wishlist"
    line_model = WishlistEntry

    @property
    def wishlist_items(self) -> List[WishlistEntry]:
        return self.items

    def get_wishlist_items_count(self) -> int:
        return len(self)

    def is_in_wishlist(self, product_id: str) -> bool:
        return self.contains(product_id)

    def fetch_wishlist(self) -> bool:
        return self.fetch()

    def _load(self, email: str) -> List[WishlistEntry]:
        entries: List[WishlistEntry] = []
        seen = set()
        for ref in self.client.get_wishlist(email):
            if ref.product_id in seen:
                continue
            seen.add(ref.product_id)

            record = self.client.get_product(ref.product_id)
            if not isinstance(record, dict):
                raise ValueError(f"Unexpected product payload for {ref.product_id}")
            entries.append(WishlistEntry.model_validate({**record, "productId": ref.product_id}))

        logger.info(f"Loaded wishlist for {email}: {len(entries)} item(s)")
        return entries

    def add_to_wishlist(self, product: Product | BaseModel | Dict[str, Any]) -> Future:
        product = as_product(product)
        if product is None:
            return _resolved(False)
        product_id = product.product_id

        def apply(items: List[WishlistEntry]):
            if any(entry.product_id == product_id for entry in items):
                return None
            items.append(WishlistEntry.model_validate(product.model_dump()))
            return items

        def remote(email: str) -> None:
            self.client.add_wishlist_item(email, product_id)

        return self._mutate(product_id, "add", apply, remote)

    def remove_from_wishlist(self, product_id: str) -> Future:
        def apply(items: List[WishlistEntry]):
            remaining = [entry for entry in items if entry.product_id != product_id]
            if len(remaining) == len(items):
                return None
            return remaining

        def remote(email: str) -> None:
            self.client.remove_wishlist_item(email, product_id)

        return self._mutate(product_id, "remove", apply, remote)

    def toggle_wishlist(self, product: Product | BaseModel | Dict[str, Any]) -> Future:
        product = as_product(product)
        if product is None:
            return _resolved(False)
        if self.is_in_wishlist(product.product_id):
            return self.remove_from_wishlist(product.product_id)
        return self.add_to_wishlist(product)

    def clear_wishlist(self) -> Future:
        """
        Backend nie ma bulk DELETE - jeden DELETE na pozycje, rownolegle.
        Jak czesc padnie, wracaja tylko te ktorych nie udalo sie usunac.
        """
        doomed: List[str] = []

        def apply(items: List[WishlistEntry]):
            if not items:
                return None
            doomed.extend(entry.product_id for entry in items)
            return []

        def remote(email: str) -> None:
            failed: Dict[str, Exception] = {}
            with ThreadPoolExecutor(max_workers=min(len(doomed), RECONCILER_WORKERS)) as pool:
                futures = {
                    pid: pool.submit(self.client.remove_wishlist_item, email, pid)
                    for pid in doomed
                }
                for pid, future in futures.items():
                    try:
                        future.result()
                    except RECOVERABLE_ERRORS as e:
                        failed[pid] = e
            if failed:
                raise BatchMutationError(failed)

        return self._mutate(ALL_KEY, "clear", apply, remote)

    def _restore(self, key, before, error):
        if key == ALL_KEY and isinstance(error, BatchMutationError):
            return [entry for entry in before if entry.product_id in error.failed]
        return super()._restore(key, before, error)
