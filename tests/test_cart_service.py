"""Cart reconciliation: merging, price snapshots, lazy creation and concurrent adds."""

import asyncio

import pytest
from bson import ObjectId

from src.commonUtils.errorUtils import NotFoundError, PersistenceError, ValidationError
from src.crud.cartService import CartService
from src.crud.classService import ClassService
from src.models.cartModel import Cart
from src.models.classModel import YogaClass


class TestAddItem:
    async def test_first_add_creates_cart_with_one_item(self, make_class):
        yoga_class = await make_class()

        cart = await CartService.add_item("guest", str(yoga_class.id))

        assert cart.user_id == "guest"
        assert len(cart.items) == 1
        assert cart.items[0].class_id == str(yoga_class.id)
        assert cart.items[0].class_name == "Morning Flow"
        assert cart.items[0].price == 20.0
        assert cart.items[0].quantity == 1
        assert await Cart.find({"user_id": "guest"}).count() == 1

    async def test_same_class_twice_increments_quantity(self, make_class):
        yoga_class = await make_class()

        await CartService.add_item("guest", str(yoga_class.id))
        cart = await CartService.add_item("guest", str(yoga_class.id))

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 2

    async def test_merge_sequence(self, make_class):
        class_a = await make_class(name="A")
        class_b = await make_class(name="B", price=15.0)

        await CartService.add_item("guest", str(class_a.id))
        await CartService.add_item("guest", str(class_a.id))
        cart = await CartService.add_item("guest", str(class_b.id))

        assert [(item.class_name, item.quantity) for item in cart.items] == [("A", 2), ("B", 1)]
        assert cart.total_items == 3
        assert cart.total_price == 55.0

    async def test_price_snapshot_is_kept_on_later_adds(self, make_class):
        yoga_class = await make_class(price=20.0)
        await CartService.add_item("guest", str(yoga_class.id))

        yoga_class.price = 35.0
        yoga_class.name = "Renamed Flow"
        await yoga_class.save()

        cart = await CartService.add_item("guest", str(yoga_class.id))

        assert cart.items[0].quantity == 2
        assert cart.items[0].price == 20.0
        assert cart.items[0].class_name == "Morning Flow"

    async def test_carts_are_kept_per_user(self, make_class):
        yoga_class = await make_class()

        await CartService.add_item("guest", str(yoga_class.id))
        cart = await CartService.add_item("mia@yoga.test", str(yoga_class.id))

        assert cart.items[0].quantity == 1
        assert await Cart.count() == 2

    @pytest.mark.parametrize("class_id", [None, "", "   "])
    async def test_missing_class_id_is_rejected(self, class_id):
        with pytest.raises(ValidationError):
            await CartService.add_item("guest", class_id)

        assert await Cart.count() == 0

    @pytest.mark.parametrize("class_id", [str(ObjectId()), "not-an-object-id"])
    async def test_unknown_class_never_creates_cart(self, class_id):
        with pytest.raises(NotFoundError):
            await CartService.add_item("guest", class_id)

        assert await Cart.count() == 0

    async def test_unknown_class_leaves_existing_cart_untouched(self, make_class):
        yoga_class = await make_class()
        await CartService.add_item("guest", str(yoga_class.id))

        with pytest.raises(NotFoundError):
            await CartService.add_item("guest", str(ObjectId()))

        cart = await CartService.get_cart("guest")
        assert len(cart.items) == 1


class YieldingCollection:
    """Cart collection that hands control back to the event loop before every read and write"""

    def __init__(self, collection):
        self._collection = collection

    def __getattr__(self, name):
        return getattr(self._collection, name)

    async def find_one(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await self._collection.find_one(*args, **kwargs)

    async def update_one(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await self._collection.update_one(*args, **kwargs)


@pytest.fixture()
def interleaved_carts(monkeypatch):
    collection = YieldingCollection(Cart.get_motor_collection())
    monkeypatch.setattr(Cart, "get_motor_collection", classmethod(lambda cls: collection))
    return collection


async def _add_by_rewriting_cart(user_id, class_id):
    """Merge that reads the cart, appends in memory and writes the whole array back"""
    yoga_class = await ClassService.get_class(class_id)
    cart = await Cart.find_one(Cart.user_id == user_id)
    items = [item.model_dump() for item in cart.items] if cart else []
    items.append({"class_id": class_id, "class_name": yoga_class.name,
                  "price": yoga_class.price, "quantity": 1})
    await Cart.get_motor_collection().update_one(
        {"user_id": user_id}, {"$set": {"items": items}}, upsert=True
    )


class TestConcurrentAdds:
    async def test_rewriting_whole_cart_loses_an_item_when_interleaved(self, make_class, interleaved_carts):
        class_a = await make_class(name="A")
        class_b = await make_class(name="B")

        await asyncio.gather(
            _add_by_rewriting_cart("guest", str(class_a.id)),
            _add_by_rewriting_cart("guest", str(class_b.id)),
        )

        cart = await Cart.find_one(Cart.user_id == "guest")
        assert len(cart.items) == 1

    async def test_two_classes_added_concurrently_are_both_kept(self, make_class, interleaved_carts):
        class_a = await make_class(name="A")
        class_b = await make_class(name="B")

        await asyncio.gather(
            CartService.add_item("guest", str(class_a.id)),
            CartService.add_item("guest", str(class_b.id)),
        )

        cart = await CartService.get_cart("guest")
        assert sorted(item.class_name for item in cart.items) == ["A", "B"]
        assert all(item.quantity == 1 for item in cart.items)

    async def test_same_class_added_concurrently_stays_unique(self, make_class, interleaved_carts):
        yoga_class = await make_class()

        await asyncio.gather(*[CartService.add_item("guest", str(yoga_class.id)) for _ in range(5)])

        cart = await CartService.get_cart("guest")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert await Cart.count() == 1

    async def test_existing_cart_keeps_every_concurrent_add(self, make_class, interleaved_carts):
        class_a = await make_class(name="A")
        class_b = await make_class(name="B")
        class_c = await make_class(name="C")
        await CartService.add_item("guest", str(class_a.id))

        await asyncio.gather(
            CartService.add_item("guest", str(class_a.id)),
            CartService.add_item("guest", str(class_b.id)),
            CartService.add_item("guest", str(class_c.id)),
        )

        cart = await CartService.get_cart("guest")
        assert sorted((item.class_name, item.quantity) for item in cart.items) == [("A", 2), ("B", 1), ("C", 1)]


class TestWriteFailures:
    async def test_gives_up_when_cart_keeps_changing(self, make_class, monkeypatch):
        yoga_class = await make_class()

        async def never_matches(*args, **kwargs):
            return False

        monkeypatch.setattr(CartService, "increment_item", never_matches)
        monkeypatch.setattr(CartService, "push_item", never_matches)

        with pytest.raises(PersistenceError) as exc_info:
            await CartService.add_item("guest", str(yoga_class.id))

        assert exc_info.value.message == "Error adding class to cart"

    async def test_cart_removed_before_it_is_read_back(self, make_class, monkeypatch):
        yoga_class = await make_class()

        async def no_cart(*args, **kwargs):
            return None

        monkeypatch.setattr(Cart, "find_one", no_cart)

        with pytest.raises(PersistenceError):
            await CartService.add_item("guest", str(yoga_class.id))


class TestRemoveItem:
    async def test_remove_pulls_only_that_class(self, make_class):
        class_a = await make_class(name="A")
        class_b = await make_class(name="B")
        await CartService.add_item("guest", str(class_a.id))
        await CartService.add_item("guest", str(class_b.id))

        result = await CartService.remove_item(str(class_a.id), "guest")

        assert result["deleted_count"] == 1
        cart = await CartService.get_cart("guest")
        assert [item.class_name for item in cart.items] == ["B"]

    async def test_remove_absent_class_deletes_nothing(self, make_class):
        yoga_class = await make_class()
        await CartService.add_item("guest", str(yoga_class.id))

        result = await CartService.remove_item(str(ObjectId()), "guest")

        assert result["deleted_count"] == 0
        cart = await CartService.get_cart("guest")
        assert len(cart.items) == 1

    async def test_class_can_be_added_again_after_removal(self, make_class):
        yoga_class = await make_class()
        await CartService.add_item("guest", str(yoga_class.id))
        await CartService.add_item("guest", str(yoga_class.id))
        await CartService.remove_item(str(yoga_class.id), "guest")

        cart = await CartService.add_item("guest", str(yoga_class.id))

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1


class TestLookups:
    async def test_get_cart_for_unknown_user(self):
        with pytest.raises(NotFoundError):
            await CartService.get_cart("nobody")

    async def test_cart_classes_by_email_returns_catalog_records(self, make_class):
        class_a = await make_class(name="A")
        class_b = await make_class(name="B")
        await make_class(name="C")
        await CartService.add_item("mia@yoga.test", str(class_a.id))
        await CartService.add_item("mia@yoga.test", str(class_b.id))

        classes = await CartService.get_cart_classes_by_email("mia@yoga.test")

        assert all(isinstance(yoga_class, YogaClass) for yoga_class in classes)
        assert sorted(yoga_class.name for yoga_class in classes) == ["A", "B"]

    async def test_cart_classes_by_email_without_cart(self):
        assert await CartService.get_cart_classes_by_email("nobody@yoga.test") == []
