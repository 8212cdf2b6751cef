# storefront/services/api_client.py
from typing import Any, Dict, List

import requests

from storefront.domain.schemas import (
    CartItemRef,
    CartRead,
    ProfileEnvelope,
    UserProfile,
    WishlistItemRef,
    WishlistRead,
)
from storefront.utils.endpoints import ApiEndpoints
from storefront.utils.retry import http_retry
from storefront.utils.settings import HTTP_TIMEOUT_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StorefrontClient:
    """
    Cienki wrapper na HTTP do backendu sklepu.
    Odczyty maja retry (tenacity), zapisy ida raz - reconciler sam decyduje co dalej.
    Non-2xx -> requests.HTTPError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.endpoints = ApiEndpoints(base_url)
        self.timeout = HTTP_TIMEOUT_SECONDS if timeout is None else timeout
        self.session = session or requests.Session()

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.info(f"StorefrontClient {method} {url}")
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        resp.raise_for_status()
        return resp

    # products
    @http_retry()
    def list_products(self, **filters) -> List[Dict[str, Any]]:
        resp = self._request("GET", self.endpoints.products, params=filters or None)
        return resp.json()

    @http_retry()
    def get_product(self, product_id: str) -> Dict[str, Any]:
        resp = self._request("GET", self.endpoints.product_by_id(product_id))
        return resp.json()

    def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Wystawia produkt; odpowiedz zawiera nadane productId."""
        return self._request("POST", self.endpoints.products, json=payload).json()

    def delete_product(self, product_id: str) -> None:
        self._request("DELETE", self.endpoints.product_by_id(product_id))

    @http_retry()
    def list_categories(self) -> List[Any]:
        return self._request("GET", self.endpoints.categories).json()

    # users
    def register_user(self, email: str, name: str | None = None) -> Dict[str, Any]:
        resp = self._request(
            "POST", self.endpoints.user_register, json={"email": email, "name": name}
        )
        return resp.json()

    @http_retry()
    def get_user(self, email: str) -> Dict[str, Any]:
        return self._request("GET", self.endpoints.user_by_email(email)).json()

    @http_retry()
    def get_user_profile(self, email: str) -> UserProfile:
        resp = self._request("GET", self.endpoints.user_profile(email))
        return ProfileEnvelope.model_validate(resp.json()).profile

    def update_user_profile(self, email: str, profile: UserProfile | Dict[str, Any]) -> UserProfile:
        body = ProfileEnvelope(profile=UserProfile.model_validate(profile))
        resp = self._request(
            "PUT", self.endpoints.user_profile(email), json=body.model_dump(by_alias=True)
        )
        return ProfileEnvelope.model_validate(resp.json()).profile

    # cart
    @http_retry()
    def get_cart(self, email: str) -> List[CartItemRef]:
        resp = self._request("GET", self.endpoints.cart(email))
        return CartRead.model_validate(resp.json()).items

    def add_cart_item(self, email: str, product_id: str, quantity: int = 1) -> None:
        self._request(
            "POST",
            self.endpoints.cart(email),
            json={"productId": product_id, "quantity": quantity},
        )

    def update_cart_item(self, email: str, product_id: str, quantity: int) -> None:
        self._request(
            "PATCH",
            self.endpoints.cart_item(email, product_id),
            json={"quantity": quantity},
        )

    def remove_cart_item(self, email: str, product_id: str) -> None:
        self._request("DELETE", self.endpoints.cart_item(email, product_id))

    def clear_cart(self, email: str) -> None:
        self._request("DELETE", self.endpoints.cart(email))

    # wishlist
    @http_retry()
    def get_wishlist(self, email: str) -> List[WishlistItemRef]:
        resp = self._request("GET", self.endpoints.wishlist(email))
        return WishlistRead.model_validate(resp.json()).items

    def add_wishlist_item(self, email: str, product_id: str) -> None:
        self._request(
            "POST", self.endpoints.wishlist(email), json={"productId": product_id}
        )

    def remove_wishlist_item(self, email: str, product_id: str) -> None:
        self._request("DELETE", self.endpoints.wishlist_item(email, product_id))

    # orders
    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", self.endpoints.create_order, json=payload).json()

    @http_retry()
    def list_orders(self, email: str) -> List[Dict[str, Any]]:
        return self._request("GET", self.endpoints.orders(email)).json()

    @http_retry()
    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", self.endpoints.stats).json()
