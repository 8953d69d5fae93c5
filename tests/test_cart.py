from storefront.models.catalog import get_product
from storefront.services.cart import CartLedger, line_id


def test_same_product_and_size_merges():
    ledger = CartLedger()
    shampoo = get_product(13)
    ledger.add(shampoo, 1, "200ml")
    ledger.add(shampoo, 2, "200ml")

    items = ledger.line_items()
    assert len(items) == 1
    assert items[0].quantity == 3
    assert items[0].id == "13-200ml"


def test_different_sizes_are_separate_lines():
    ledger = CartLedger()
    shampoo = get_product(13)
    ledger.add(shampoo, 1, "200ml")
    ledger.add(shampoo, 1, "440ml")
    assert [item.id for item in ledger.line_items()] == ["13-200ml", "13-440ml"]


def test_line_items_keep_insertion_order():
    ledger = CartLedger()
    for pid in (5, 1, 9):
        ledger.add(get_product(pid))
    ledger.add(get_product(1))
    assert [item.id for item in ledger.line_items()] == ["5", "1", "9"]


def test_line_item_shares_product():
    ledger = CartLedger()
    serum = get_product(2)
    item = ledger.add(serum)
    assert item.product is serum


def test_decrement_stops_at_one():
    ledger = CartLedger()
    ledger.add(get_product(1))
    ledger.decrement("1")
    assert ledger.line_items()[0].quantity == 1


def test_set_quantity_clamps_to_one():
    ledger = CartLedger()
    ledger.add(get_product(1), 4)
    ledger.set_quantity("1", 0)
    assert ledger.line_items()[0].quantity == 1
    ledger.set_quantity("1", -3)
    assert ledger.line_items()[0].quantity == 1


def test_increment_has_no_upper_bound():
    ledger = CartLedger()
    ledger.add(get_product(1), 99)
    ledger.increment("1")
    assert ledger.item_count == 100


def test_unknown_line_is_ignored():
    ledger = CartLedger()
    assert ledger.set_quantity("404", 3) is None
    assert ledger.increment("404") is None
    assert len(ledger) == 0


def test_remove_is_idempotent():
    ledger = CartLedger()
    ledger.add(get_product(1))
    ledger.remove("1")
    ledger.remove("1")
    assert ledger.line_items() == []


def test_subtotal_uses_size_prices():
    ledger = CartLedger()
    ledger.add(get_product(13), 2, "200ml")
    ledger.add(get_product(2), 1)
    assert ledger.subtotal == 1045.0
    assert ledger.item_count == 3


def test_line_id():
    assert line_id(13, "200ml") == "13-200ml"
    assert line_id(4) == "4"


def test_add_never_drops_below_one():
    ledger = CartLedger()
    cleanser = get_product(1)
    ledger.add(cleanser, 0)
    assert ledger.line_items()[0].quantity == 1

    ledger.add(cleanser, 2)
    ledger.add(cleanser, -5)
    assert ledger.line_items()[0].quantity == 1
    assert ledger.subtotal > 0
