import pytest

from tiendainv.inventory import Inventory, InventoryError, Product, Store
from tiendainv.reports import (
    Combo,
    SellerRank,
    apply_discount,
    build_report,
    co_purchase_graph,
    frequent_combos,
    low_sales_suggestions,
    top_sellers,
)


def _product(name, code, category="bebidas", sold=0, sale=20.0, cost=10.0, stock=50):
    return Product(
        name=name,
        brand="marca",
        category=category,
        barcode=code,
        stock=stock,
        sale_price=sale,
        market_price=sale,
        cost_price=cost,
        sold=sold,
    )


def _store_with_purchase():
    store = Store()
    store.inventory.add(_product("agua", "001"))
    store.inventory.add(_product("jugo", "002"))
    store.inventory.add(_product("pan", "003", category="panaderia"))
    store.cart.add(store.inventory, "001", 2)
    store.cart.add(store.inventory, "002", 1)
    store.confirm_purchase()
    return store


def test_top_sellers_sorted_and_limited():
    counter = {"a": 1, "b": 7, "c": 4, "d": 2}
    ranks = top_sellers(counter, 3)
    assert ranks == [SellerRank("b", 7), SellerRank("c", 4), SellerRank("d", 2)]


def test_top_sellers_empty_counter():
    assert top_sellers({}, 3) == []


def test_top_sellers_is_descending_invariant():
    counter = {f"p{i}": (i * 7) % 11 for i in range(20)}
    ranks = top_sellers(counter, 20)
    sales = [rank.sales for rank in ranks]
    assert sales == sorted(sales, reverse=True)
    assert len(ranks) == len(counter)


def test_co_purchase_graph_counts_both_directions():
    a = _product("agua", "001")
    b = _product("jugo", "002")
    graph = co_purchase_graph([[a, b], [b, a]])
    assert graph["agua"]["jugo"] == 2
    assert graph["jugo"]["agua"] == 2


def test_co_purchase_graph_skips_same_barcode():
    a = _product("agua", "001")
    graph = co_purchase_graph([[a, a]])
    assert len(graph) == 0


def test_frequent_combos_sorted_descending():
    a = _product("agua", "001")
    b = _product("jugo", "002")
    c = _product("pan", "003")
    history = [[a, b], [a, b], [a, c]]
    combos = frequent_combos(history, 10)
    assert combos[0].frequency == 2
    assert {(combo.name_a, combo.name_b) for combo in combos[:2]} == {
        ("agua", "jugo"),
        ("jugo", "agua"),
    }
    frequencies = [combo.frequency for combo in combos]
    assert frequencies == sorted(frequencies, reverse=True)


def test_frequent_combos_limit():
    a = _product("agua", "001")
    b = _product("jugo", "002")
    c = _product("pan", "003")
    combos = frequent_combos([[a, b], [a, c], [b, c]], 3)
    assert len(combos) == 3
    assert all(isinstance(combo, Combo) for combo in combos)
    assert frequent_combos([], 3) == []


def test_low_sales_discount_depends_on_margin():
    inventory = Inventory()
    inventory.add(_product("agua", "001", sale=20.0, cost=10.0))
    inventory.add(_product("pan", "002", category="panaderia", sale=11.0, cost=10.0))
    by_name = {s.product.name: s for s in low_sales_suggestions(inventory, 3, 10)}
    assert by_name["agua"].discount_percent == 10
    assert by_name["pan"].discount_percent == 5


def test_low_sales_threshold_excludes_good_sellers():
    inventory = Inventory()
    inventory.add(_product("agua", "001", sold=10))
    inventory.add(_product("jugo", "002", sold=3))
    names = [s.product.name for s in low_sales_suggestions(inventory, 3, 10)]
    assert names == ["jugo"]


def test_low_sales_combo_partner_in_same_category():
    inventory = Inventory()
    inventory.add(_product("agua", "001"))
    inventory.add(_product("jugo", "002"))
    inventory.add(_product("pan", "003", category="panaderia"))
    by_name = {s.product.name: s for s in low_sales_suggestions(inventory, 3, 10)}
    assert by_name["agua"].combo_partner.name == "jugo"
    assert by_name["jugo"].combo_partner.name == "agua"
    assert by_name["pan"].combo_partner is None


def test_low_sales_limit():
    inventory = Inventory()
    for i in range(15):
        inventory.add(_product(f"item{i}", f"c{i}"))
    assert len(low_sales_suggestions(inventory, 3, 10)) == 10


def test_apply_discount_changes_price():
    product = _product("agua", "001", sale=100.0)
    new_price = apply_discount(product, 10)
    assert new_price == pytest.approx(90.0)
    assert product.sale_price == new_price


@pytest.mark.parametrize("percentage", [0, -5, 101])
def test_apply_discount_rejects_invalid(percentage):
    product = _product("agua", "001", sale=100.0)
    with pytest.raises(InventoryError):
        apply_discount(product, percentage)
    assert product.sale_price == 100.0


def test_build_report_needs_history():
    with pytest.raises(InventoryError):
        build_report(Store())


def test_build_report_from_purchase():
    store = _store_with_purchase()
    report = build_report(store)
    assert report.top_sellers[0] == SellerRank("agua", 2)
    assert {(c.name_a, c.name_b) for c in report.combos} == {("agua", "jugo"), ("jugo", "agua")}
    assert all(c.frequency == 1 for c in report.combos)
    assert {p.name for p in report.discount_candidates} == {"agua", "jugo", "pan"}