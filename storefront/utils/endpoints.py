# storefront/utils/endpoints.py
from urllib.parse import quote

from storefront.utils.settings import STOREFRONT_API_URL


def _segment(value) -> str:
    return quote(str(value), safe="@")


class ApiEndpoints:
    """
    Katalog adresow backendu sklepu.
    Same dane - nazwa operacji -> URL wzgledem base_url.
    """

    def __init__(self, base_url: str | None = None):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")

    def _url(self, *parts) -> str:
        return "/".join([self.base_url, "api", *parts])

    # products
    @property
    def products(self) -> str:
        return self._url("products")

    def product_by_id(self, product_id) -> str:
        return self._url("products", _segment(product_id))

    @property
    def categories(self) -> str:
        return self._url("categories")

    # users
    @property
    def user_register(self) -> str:
        return self._url("users", "register")

    def user_by_email(self, email: str) -> str:
        return self._url("users", _segment(email))

    def user_profile(self, email: str) -> str:
        return self._url("users", _segment(email), "profile")

    # cart
    def cart(self, email: str) -> str:
        return self._url("cart", _segment(email))

    def cart_item(self, email: str, product_id) -> str:
        return self._url("cart", _segment(email), _segment(product_id))

    # wishlist
    def wishlist(self, email: str) -> str:
        return self._url("wishlist", _segment(email))

    def wishlist_item(self, email: str, product_id) -> str:
        return self._url("wishlist", _segment(email), _segment(product_id))

    # orders
    def orders(self, email: str) -> str:
        return self._url("orders", _segment(email))

    @property
    def create_order(self) -> str:
        return self._url("orders")

    # stats
    @property
    def stats(self) -> str:
        return self._url("stats")
