# storefront/domain/schemas.py
from datetime import datetime
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_id(value):
    # backend czasem zwraca liczbowe id, trzymamy zawsze stringi
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(int(value))
    return value


class User(BaseModel):
    """Zalogowany uzytkownik (z zewnetrznego providera)."""

    email: str = Field(..., min_length=3)
    name: str | None = None

    model_config = ConfigDict(frozen=True)


class Product(BaseModel):
    """Snapshot produktu z katalogu. Rekord nadrzedny zyje w backendzie."""

    product_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("productId", "product_id", "id", "_id"),
        serialization_alias="productId",
    )
    title: str = ""
    price: float = Field(0.0, ge=0)
    image_url: str | None = Field(
        None,
        validation_alias=AliasChoices("imageUrl", "image_url", "image"),
        serialization_alias="imageUrl",
    )
    category: str | None = None
    condition: str | None = None
    seller_email: str | None = Field(
        None,
        validation_alias=AliasChoices("sellerEmail", "seller_email"),
        serialization_alias="sellerEmail",
    )
    seller_name: str | None = Field(
        None,
        validation_alias=AliasChoices("sellerName", "seller_name"),
        serialization_alias="sellerName",
    )
    stock: int | None = Field(None, ge=0)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("product_id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


class CartLine(Product):
    """Pozycja koszyka: snapshot produktu + ilosc."""

    quantity: int = Field(1, ge=1)


class WishlistEntry(Product):
    """Pozycja wishlisty - samo czlonkostwo, bez ilosci."""


class CartItemRef(BaseModel):
    """Pozycja koszyka tak jak zwraca ja GET /api/cart/{email}."""

    product_id: str = Field(
        ...,
        validation_alias=AliasChoices("productId", "product_id"),
        serialization_alias="productId",
    )
    quantity: int = 1

    @field_validator("product_id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


class WishlistItemRef(BaseModel):
    product_id: str = Field(
        ...,
        validation_alias=AliasChoices("productId", "product_id"),
        serialization_alias="productId",
    )

    @field_validator("product_id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


class CartRead(BaseModel):
    items: List[CartItemRef] = Field(default_factory=list)


class WishlistRead(BaseModel):
    items: List[WishlistItemRef] = Field(default_factory=list)


class OrderLine(BaseModel):
    product_id: str = Field(
        ...,
        validation_alias=AliasChoices("productId", "product_id"),
        serialization_alias="productId",
    )
    title: str = ""
    price: float = Field(..., ge=0)
    quantity: int = Field(..., gt=0)
    seller_email: str | None = Field(
        None,
        validation_alias=AliasChoices("sellerEmail", "seller_email"),
        serialization_alias="sellerEmail",
    )

    @field_validator("product_id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamowienia z koszyka."""

    buyer_email: str = Field(
        ...,
        validation_alias=AliasChoices("buyerEmail", "buyer_email"),
        serialization_alias="buyerEmail",
    )
    items: List[OrderLine] = Field(..., min_length=1)
    total: float = Field(..., ge=0)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: str = Field(..., validation_alias=AliasChoices("id", "_id", "orderId"))
    buyer_email: str = Field(
        ...,
        validation_alias=AliasChoices("buyerEmail", "buyer_email"),
        serialization_alias="buyerEmail",
    )
    items: List[OrderLine] = Field(default_factory=list)
    total: float
    status: str = "pending"
    created_at: datetime | None = Field(
        None,
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
    )

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


# ---- request bodies backendu (dev stub) ----

class UserCreate(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    email: str = Field(..., min_length=3)
    name: str | None = Field(None, max_length=100)


class CartItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("productId", "product_id"),
        serialization_alias="productId",
    )
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")

    @field_validator("product_id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


class QuantityIn(BaseModel):
    quantity: int = Field(..., gt=0)


class WishlistItemIn(BaseModel):
    product_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("productId", "product_id"),
        serialization_alias="productId",
    )

    @field_validator("product_id", mode="before")
    @classmethod
    def normalize_id(cls, value):
        return _as_id(value)


# ---- panel sprzedawcy ----

class ProductCreate(BaseModel):
    """Schema dla wystawienia produktu (POST /api/products)."""

    title: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    description: str | None = None
    category: str | None = None
    condition: str | None = None
    image_url: str | None = Field(
        None,
        validation_alias=AliasChoices("imageUrl", "image_url", "image"),
        serialization_alias="imageUrl",
    )
    stock: int = Field(1, ge=0)
    seller_email: str = Field(
        ...,
        min_length=3,
        validation_alias=AliasChoices("sellerEmail", "seller_email"),
        serialization_alias="sellerEmail",
    )
    seller_name: str | None = Field(
        None,
        validation_alias=AliasChoices("sellerName", "seller_name"),
        serialization_alias="sellerName",
    )

    # datePosted, views, rating itp. przechodza dalej bez walidacji
    model_config = ConfigDict(extra="allow")


class Address(BaseModel):
    location_type: str | None = Field(
        None,
        validation_alias=AliasChoices("locationType", "location_type"),
        serialization_alias="locationType",
    )
    custom_address: str | None = Field(
        None,
        validation_alias=AliasChoices("customAddress", "custom_address"),
        serialization_alias="customAddress",
    )


class UserProfile(BaseModel):
    """Dane kontaktowe z profilu (osobno dla kupowania i sprzedawania)."""

    buying_contact_number: str | None = Field(
        None,
        validation_alias=AliasChoices("buyingContactNumber", "buying_contact_number"),
        serialization_alias="buyingContactNumber",
    )
    selling_contact_number: str | None = Field(
        None,
        validation_alias=AliasChoices("sellingContactNumber", "selling_contact_number"),
        serialization_alias="sellingContactNumber",
    )
    address: Address = Field(default_factory=Address)


class ProfileEnvelope(BaseModel):
    """GET/PUT /api/users/{email}/profile - profil zawiniety w {"profile": ...}."""

    profile: UserProfile = Field(default_factory=UserProfile)
