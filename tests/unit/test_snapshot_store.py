"""
Unit tests for the local snapshot store and warm start.
"""

from storefront.services.cart_service import CartService
from storefront.services.snapshot_store import SnapshotStore


def test_save_and_load_round_trip(tmp_path):
    store = SnapshotStore(directory=str(tmp_path))

    store.save("cart", "a@x.com", [{"productId": "p1", "quantity": 2}])

    assert store.load("cart", "a@x.com") == [{"productId": "p1", "quantity": 2}]
    assert store.load("wishlist", "a@x.com") == []
    assert store.load("cart", "b@x.com") == []


def test_corrupt_file_is_ignored(tmp_path):
    store = SnapshotStore(directory=str(tmp_path))
    store.save("cart", "a@x.com", [])
    path = store._path("cart", "a@x.com")
    with open(path, "w", encoding="utf-8") as f:
        f.write("{not json")

    assert store.load("cart", "a@x.com") == []


def test_disabled_store_does_nothing(tmp_path):
    store = SnapshotStore(directory="")

    store.save("cart", "a@x.com", [{"productId": "p1"}])

    assert store.enabled is False
    assert store.load("cart", "a@x.com") == []
    assert list(tmp_path.iterdir()) == []


def test_fetched_state_warm_starts_next_session(tmp_path, identity, fake_client, executor):
    store = SnapshotStore(directory=str(tmp_path))
    cart = CartService(identity, client=fake_client, executor=executor, snapshot_store=store)
    fake_client.carts["a@x.com"] = {"p1": 1}
    identity.sign_in({"email": "a@x.com"})
    identity.sign_out()

    # serwer padl - zostaje tylko to co widzielismy przy starcie
    fake_client.failing.add("get_cart")
    states = []
    cart.subscribe(states.append)
    identity.sign_in({"email": "a@x.com"})

    loading = states[0]
    assert loading.pending is True
    assert [(l.product_id, l.quantity) for l in loading.items] == [("p1", 1)]
    assert cart.items == []
    assert cart.state.error is not None


def test_only_server_confirmed_lists_are_persisted(tmp_path, identity, fake_client, executor):
    """Optimistic and rolled-back lines never land in the snapshot; the next fetch does."""
    store = SnapshotStore(directory=str(tmp_path))
    cart = CartService(identity, client=fake_client, executor=executor, snapshot_store=store)
    fake_client.carts["a@x.com"] = {"p1": 1}
    identity.sign_in({"email": "a@x.com"})

    fake_client.failing.add("add_cart_item")
    assert cart.add_to_cart({"productId": "p2", "price": 50}).result() is False
    fake_client.failing.clear()
    assert cart.add_to_cart({"productId": "p3", "price": 25.5}).result() is True

    assert [e["productId"] for e in store.load("cart", "a@x.com")] == ["p1"]

    assert cart.fetch_cart() is True
    assert [(e["productId"], e["quantity"]) for e in store.load("cart", "a@x.com")] == [
        ("p1", 1),
        ("p3", 1),
    ]


def test_failed_fetch_keeps_previous_snapshot(tmp_path, identity, fake_client, executor):
    store = SnapshotStore(directory=str(tmp_path))
    cart = CartService(identity, client=fake_client, executor=executor, snapshot_store=store)
    fake_client.carts["a@x.com"] = {"p2": 2}
    identity.sign_in({"email": "a@x.com"})
    fake_client.failing.add("get_cart")

    assert cart.fetch_cart() is False

    assert [e["productId"] for e in store.load("cart", "a@x.com")] == ["p2"]
