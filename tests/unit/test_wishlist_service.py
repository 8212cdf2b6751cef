"""
Unit tests for WishlistService.
"""

from storefront.domain.schemas import WishlistEntry

EMAIL = "saver@campus.edu"


def _ids(items):
    return [entry.product_id for entry in items]


def test_adding_same_product_twice_keeps_one_entry(wishlist, identity, fake_client):
    identity.sign_in({"email": EMAIL})

    assert wishlist.add_to_wishlist({"productId": "p2"}).result() is True
    assert wishlist.add_to_wishlist({"productId": "p2"}).result() is True

    assert _ids(wishlist.items) == ["p2"]
    assert wishlist.get_wishlist_items_count() == 1
    assert len(fake_client.calls_named("add_wishlist_item")) == 1


def test_fetch_builds_entries_from_product_records(wishlist, identity, fake_client):
    fake_client.wishlists[EMAIL] = ["p3", "p1", "p3"]

    identity.sign_in({"email": EMAIL})

    assert _ids(wishlist.wishlist_items) == ["p3", "p1"]
    assert isinstance(wishlist.items[0], WishlistEntry)
    assert wishlist.items[1].title == "Calculator"
    assert wishlist.fetch_wishlist() is True


def test_remove_failure_rolls_back(wishlist, identity, fake_client):
    fake_client.wishlists[EMAIL] = ["p1", "p2", "p3"]
    identity.sign_in({"email": EMAIL})
    before = wishlist.items
    fake_client.failing.add("remove_wishlist_item")

    assert wishlist.remove_from_wishlist("p2").result() is False
    assert wishlist.items == before


def test_toggle_adds_then_removes(wishlist, identity, fake_client):
    identity.sign_in({"email": EMAIL})

    wishlist.toggle_wishlist({"_id": "p1", "title": "Calculator", "price": 100})
    assert wishlist.is_in_wishlist("p1")

    wishlist.toggle_wishlist({"_id": "p1"})
    assert not wishlist.is_in_wishlist("p1")
    assert fake_client.wishlists[EMAIL] == []


def test_clear_deletes_every_entry(wishlist, identity, fake_client):
    fake_client.wishlists[EMAIL] = ["p1", "p2", "p3"]
    identity.sign_in({"email": EMAIL})

    assert wishlist.clear_wishlist().result() is True

    assert wishlist.items == []
    assert fake_client.wishlists[EMAIL] == []
    deleted = sorted(c[2] for c in fake_client.calls_named("remove_wishlist_item"))
    assert deleted == ["p1", "p2", "p3"]


def test_partial_clear_restores_only_failed_entries(wishlist, identity, fake_client):
    fake_client.wishlists[EMAIL] = ["p1", "p2", "p3"]
    identity.sign_in({"email": EMAIL})
    fake_client.failing_wishlist_ids.update({"p1", "p3"})

    assert wishlist.clear_wishlist().result() is False

    assert _ids(wishlist.items) == ["p1", "p3"]
    assert fake_client.wishlists[EMAIL] == ["p1", "p3"]


def test_clear_of_empty_wishlist_sends_nothing(wishlist, identity, fake_client):
    identity.sign_in({"email": EMAIL})

    assert wishlist.clear_wishlist().result() is True
    assert fake_client.calls_named("remove_wishlist_item") == []


def test_add_while_signed_out_is_ignored(wishlist, fake_client):
    assert wishlist.add_to_wishlist({"productId": "p1"}).result() is False
    assert wishlist.items == []
    assert fake_client.calls == []


def test_invalid_product_snapshot_is_rejected(wishlist, identity, fake_client):
    identity.sign_in({"email": EMAIL})

    assert wishlist.add_to_wishlist({"title": "No id"}).result() is False
    assert wishlist.toggle_wishlist({"productId": "p1", "price": -5}).result() is False

    assert wishlist.items == []
    assert fake_client.calls_named("add_wishlist_item") == []
