import pytest

from tiendainv.inventory import (
    SAVE_HEADER,
    Cart,
    CartLine,
    Inventory,
    InventoryError,
    Product,
    Store,
)

CSV_TEXT = (
    "ID,Nombre,Marca,Categoria,PrecioVenta,PrecioMercado,PrecioCosto,Stock,CodigoBarras\n"
    "1,  Leche Entera ,Colun,Lacteos,1000,1100,800,10,A1\n"
    "2,Queso,Soprole, lacteos ,3000,3200,2000,5,A2\n"
    "3,Pan,Ideal,Panaderia,500,600,300,0,B1\n"
    "4,Incompleto,Marca,Cat,1,2,3\n"
)


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "inv.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def inventory(csv_path):
    inv = Inventory()
    inv.load_csv(csv_path)
    return inv


def make_product(code="X1", name="te", category="bebidas", stock=4):
    return Product(
        name=name, brand="marca", category=category, barcode=code,
        stock=stock, sale_price=10.0, market_price=12.0, cost_price=5.0,
    )


def test_load_normalizes_and_skips_short_rows(csv_path):
    inv = Inventory()
    assert inv.load_csv(csv_path) == 3
    assert len(inv) == 3
    leche = inv.get("A1")
    assert leche.name == "leche entera"
    assert leche.brand == "colun"
    assert leche.category == "lacteos"
    assert leche.stock == 10
    assert leche.sale_price == 1000.0
    assert leche.sold == 0
    assert inv.get("4") is None


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(InventoryError):
        Inventory().load_csv(tmp_path / "missing.csv")


def test_load_lenient_numbers(tmp_path):
    path = tmp_path / "inv.csv"
    path.write_text("h\n1,a,b,c,abc,2x,3,7unidades,Z9\n", encoding="utf-8")
    inv = Inventory()
    inv.load_csv(path)
    product = inv.get("Z9")
    assert product.stock == 7
    assert product.sale_price == 0.0
    assert product.market_price == 2.0


def test_duplicate_barcode_keeps_first_in_code_index(tmp_path):
    path = tmp_path / "inv.csv"
    path.write_text("h\n1,uno,m,c,1,1,1,1,D\n2,dos,m,c,1,1,1,1,D\n", encoding="utf-8")
    inv = Inventory()
    inv.load_csv(path)
    assert inv.get("D").name == "uno"
    assert len(inv.find_by_category("c")) == 2


def test_find_by_name_and_category(inventory):
    assert [p.barcode for p in inventory.find_by_name("  LECHE entera ")] == ["A1"]
    assert {p.barcode for p in inventory.find_by_category("Lacteos")} == {"A1", "A2"}
    assert inventory.find_by_name("nada") == []
    assert set(inventory.categories()) == {"lacteos", "panaderia"}


def test_filter_by_stock(inventory):
    assert {p.barcode for p in inventory.filter_by_stock(5, at_most=True)} == {"A2", "B1"}
    assert {p.barcode for p in inventory.filter_by_stock(5, at_most=False)} == {"A1", "A2"}


def test_filter_by_sales(inventory):
    inventory.get("A1").sold = 3
    assert {p.barcode for p in inventory.filter_by_sales(1, at_most=False)} == {"A1"}
    assert {p.barcode for p in inventory.filter_by_sales(0, at_most=True)} == {"A2", "B1"}


def test_add_and_duplicate(inventory):
    product = make_product()
    inventory.add(product)
    assert inventory.get("X1") is product
    assert inventory.find_by_category("bebidas") == [product]
    with pytest.raises(InventoryError):
        inventory.add(make_product())


def test_set_stock(inventory):
    inventory.set_stock("A2", 42)
    assert inventory.find_by_name("queso")[0].stock == 42
    with pytest.raises(InventoryError):
        inventory.set_stock("nope", 1)


def test_remove_cleans_indexes(inventory):
    removed = inventory.remove("B1")
    assert removed.name == "pan"
    assert inventory.get("B1") is None
    assert "panaderia" not in inventory.categories()
    assert inventory.find_by_name("pan") == []
    with pytest.raises(InventoryError):
        inventory.remove("B1")


def test_remove_keeps_other_products_in_category(inventory):
    inventory.remove("A1")
    assert [p.barcode for p in inventory.find_by_category("lacteos")] == ["A2"]


def test_save_and_reload_round_trip(inventory, tmp_path):
    target = inventory.save_csv(tmp_path / "out.csv")
    lines = target.read_text(encoding="utf-8").splitlines()
    assert lines[0] == SAVE_HEADER
    assert len(lines) == 4
    reloaded = Inventory()
    reloaded.load_csv(target)
    for original in inventory.products():
        copy = reloaded.get(original.barcode)
        assert copy.name == original.name
        assert copy.stock == original.stock
        assert copy.sale_price == pytest.approx(original.sale_price)


def test_cart_add_takes_stock(inventory):
    cart = Cart()
    line = cart.add(inventory, "A1", 4)
    assert isinstance(line, CartLine)
    assert line.quantity == 4
    assert inventory.get("A1").stock == 6
    assert cart.total() == pytest.approx(4 * 1000.0)
    assert len(cart) == 1


@pytest.mark.parametrize("code,quantity", [("A1", 0), ("A1", 11), ("B1", 1), ("zz", 1)])
def test_cart_add_errors(inventory, code, quantity):
    with pytest.raises(InventoryError):
        Cart().add(inventory, code, quantity)


def test_cart_remove(inventory):
    cart = Cart()
    with pytest.raises(InventoryError):
        cart.remove(1)
    cart.add(inventory, "A1", 2)
    cart.add(inventory, "A2", 1)
    with pytest.raises(InventoryError):
        cart.remove(3)
    removed = cart.remove(1)
    assert removed.barcode == "A1"
    assert [line.barcode for line in cart] == ["A2"]
    assert inventory.get("A1").stock == 8


def test_confirm_purchase(csv_path):
    store = Store()
    store.inventory.load_csv(csv_path)
    store.cart.add(store.inventory, "A1", 2)
    store.cart.add(store.inventory, "A2", 1)
    bought = store.confirm_purchase()
    assert [p.barcode for p in bought] == ["A1", "A2"]
    assert store.inventory.get("A1").sold == 2
    assert store.sales_counter["leche entera"] == 2
    assert store.history == [bought]
    assert len(store.cart) == 0
    store.cart.add(store.inventory, "A1", 3)
    store.confirm_purchase()
    assert store.sales_counter["leche entera"] == 5
    assert store.inventory.get("A1").sold == 5


def test_confirm_empty_cart_raises():
    with pytest.raises(InventoryError):
        Store().confirm_purchase()