"""Unit tests for the Cart aggregate."""

import pytest

from storefront.domain.exceptions import ItemNotFoundError, ValidationError
from storefront.domain.model.cart import Cart, CartLineItem
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money


def _mug(price: str = "9.99") -> Product:
    return Product(id="mug", name="Mug", price=Money.of(price), images=["mug.png"], inventory=10)


def _lamp() -> Product:
    return Product(id="lamp", name="Lamp", price=Money.of("25.00"), inventory=3)


def _assert_total_consistent(cart: Cart) -> None:
    assert cart.total == Money.sum(i.line_total for i in cart.items)


class TestCartAdd:

    def test_new_line_snapshots_product(self):
        cart = Cart(user_id="u1")
        line = cart.add(_mug(), 3)
        assert line.quantity == 3
        assert line.unit_price == Money.of("9.99")
        assert line.name == "Mug"
        assert line.image == "mug.png"
        assert cart.total == Money.of("29.97")

    def test_adding_again_tops_up_single_line(self):
        cart = Cart(user_id="u1")
        cart.add(_mug(), 1)
        cart.add(_mug(), 2)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        _assert_total_consistent(cart)

    def test_adding_again_reprices_to_current_price(self):
        cart = Cart(user_id="u1")
        cart.add(_mug("9.99"), 1)
        cart.add(_mug("8.00"), 1)
        assert cart.items[0].unit_price == Money.of("8.00")
        assert cart.total == Money.of("16.00")

    def test_uses_effective_price(self):
        cart = Cart(user_id="u1")
        sale = Product(id="p", name="P", price=Money.of("10"), sale_price=Money.of("7"), on_sale=True)
        cart.add(sale)
        assert cart.total == Money.of("7")

    @pytest.mark.parametrize("quantity", [0, -4])
    def test_non_positive_quantity_adds_one(self, quantity):
        cart = Cart(user_id="u1")
        cart.add(_mug(), quantity)
        assert cart.items[0].quantity == 1

    @pytest.mark.parametrize("quantity", [0, -4])
    def test_non_positive_top_up_keeps_quantity_but_reprices(self, quantity):
        cart = Cart(user_id="u1")
        cart.add(_mug("9.99"), 3)
        cart.add(_mug("8.00"), quantity)
        assert cart.items[0].quantity == 3
        assert cart.items[0].unit_price == Money.of("8.00")
        assert cart.total == Money.of("24.00")


class TestCartSetQuantity:

    def test_sets_exact_quantity(self):
        cart = Cart(user_id="u1")
        cart.add(_mug(), 1)
        cart.set_quantity("mug", 5)
        assert cart.items[0].quantity == 5
        _assert_total_consistent(cart)

    def test_zero_removes_line(self):
        cart = Cart(user_id="u1")
        cart.add(_mug(), 2)
        cart.set_quantity("mug", 0)
        assert cart.is_empty
        assert cart.total == Money.zero()

    def test_missing_item_rejected(self):
        cart = Cart(user_id="u1")
        with pytest.raises(ItemNotFoundError):
            cart.set_quantity("mug", 2)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_for_missing_item_rejected(self, quantity):
        cart = Cart(user_id="u1")
        cart.add(_lamp(), 1)
        with pytest.raises(ItemNotFoundError):
            cart.set_quantity("mug", quantity)
        assert [i.product_id for i in cart.items] == ["lamp"]


class TestCartRemoveAndClear:

    def test_remove(self):
        cart = Cart(user_id="u1")
        cart.add(_mug(), 1)
        cart.add(_lamp(), 1)
        cart.remove("mug")
        assert [i.product_id for i in cart.items] == ["lamp"]
        assert cart.total == Money.of("25.00")

    def test_remove_absent_is_noop(self):
        cart = Cart(user_id="u1")
        cart.add(_lamp(), 1)
        cart.remove("mug")
        assert cart.total == Money.of("25.00")

    def test_clear(self):
        cart = Cart(user_id="u1")
        cart.add(_mug(), 2)
        cart.add(_lamp(), 1)
        cart.clear()
        assert cart.is_empty
        assert cart.total == Money.zero()
        assert cart.item_count == 0


class TestCartInvariants:

    def test_duplicate_lines_rejected(self):
        line = CartLineItem("mug", 1, Money.of("1"))
        with pytest.raises(ValidationError, match="Duplicate"):
            Cart(user_id="u1", items=[line, CartLineItem("mug", 2, Money.of("1"))])

    def test_line_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            CartLineItem("mug", 0, Money.of("1"))

    def test_total_recomputed_after_every_mutation(self):
        cart = Cart(user_id="u1")
        cart.add(_mug(), 2)
        _assert_total_consistent(cart)
        cart.add(_lamp(), 1)
        _assert_total_consistent(cart)
        cart.set_quantity("lamp", 4)
        _assert_total_consistent(cart)
        cart.remove("mug")
        _assert_total_consistent(cart)
        assert cart.item_count == 4


class TestCartAccumulation:

    def test_two_then_three_is_one_line_of_five(self):
        cart = Cart(user_id="u1")
        cart.add(_lamp(), 2)
        cart.add(_lamp(), 3)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.total == Money.of("125.00")

    @pytest.mark.parametrize(
        "adds",
        [
            [("mug", 1)],
            [("mug", 2), ("lamp", 1), ("mug", 4)],
            [("lamp", 3), ("lamp", 1), ("mug", 1), ("lamp", 2)],
        ],
    )
    def test_total_matches_line_sum_for_any_add_sequence(self, adds):
        products = {"mug": _mug(), "lamp": _lamp()}
        cart = Cart(user_id="u1")
        for product_id, quantity in adds:
            cart.add(products[product_id], quantity)
        _assert_total_consistent(cart)
