# tiendainv

A terminal program for running a small shop. It keeps a product inventory and
a customer shopping cart, records purchases, and builds sales reports. The
menus and messages are in Spanish.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running

```
tiendainv
```

The program begins by asking for a user type:

- **Administrador**: load the inventory from a CSV file, search products by
  name or category, list products whose stock or units sold are at or below
  (or at or above) a threshold, register, restock or delete products, save the
  inventory to `inventario_guardado.csv` in the current directory, and
  generate a full report.
- **Cliente**: add products to the cart by barcode, remove them, view the cart
  with subtotals and a total, and confirm the purchase.

Entering `0` leaves a menu; `0` at the user-type prompt, or the end of input,
ends the program. The screen is cleared between menus only when output goes
to a terminal.

## Inventory file

The first line is a header and is skipped. Each later line holds these
columns, in this order:

```
ID,Nombre,Marca,Categoria,PrecioVenta,PrecioMercado,PrecioCosto,Stock,CodigoBarras
1,Leche Entera,Marca Uno,Lacteos,1090,1200,800,25,1001
```

Fields may be quoted, with `""` standing for a literal quote. Names, brands
and categories are trimmed and lower-cased when they are loaded; text fields
are cut to 50 characters. Lines with fewer than nine columns are skipped. When
a barcode appears more than once, lookups by barcode find the first line with
that barcode.

A saved file has the same columns, with prices written to two decimals.

## Reports

A report needs at least one confirmed purchase. It lists:

- the three product names with the most units sold,
- the three name pairs most often bought together (each pair is counted in
  both orders, so `a + b` and `b + a` may both appear),
- up to ten products with three or fewer units sold. Each comes with a
  suggested discount (10% when the sale price is more than 1.5 times the cost
  price, 5% otherwise) and, where one exists, another product from the same
  category to offer as a combo. The administrator can then lower the sale
  price of one of them by a percentage greater than 0 and at most 100.

## Using it as a library

```python
from tiendainv.inventory import InventoryError, Product, Store
from tiendainv.reports import apply_discount, build_report

store = Store()
store.inventory.load_csv("inventario.csv")
store.inventory.add(Product(name="pan", brand="casa", category="panaderia",
                            barcode="2001", stock=10, sale_price=900.0,
                            cost_price=500.0))
store.cart.add(store.inventory, "2001", 2)
store.confirm_purchase()

report = build_report(store)
for rank in report.top_sellers:
    print(rank.name, rank.sales)
for combo in report.combos:
    print(combo.name_a, combo.name_b, combo.frequency)
for suggestion in report.suggestions:
    print(suggestion.product.name, suggestion.discount_percent)

store.inventory.save_csv("salida.csv")
```

Operations that cannot be done (an unknown barcode, a duplicate barcode, a
quantity beyond the stock, an empty cart, a report with no purchases) raise
`InventoryError`.

The modules are:

- `tiendainv.inventory`: `Product`, `Inventory`, `Cart`, `CartLine`, `Store`
  and `InventoryError`.
- `tiendainv.reports`: `top_sellers`, `co_purchase_graph`, `frequent_combos`,
  `low_sales_suggestions`, `apply_discount` and `build_report`.
- `tiendainv.hashmap`: `HashMap`, a string-keyed mapping that iterates in
  bucket order, used for the indexes.
- `tiendainv.textutils`: `parse_csv_line`, `split_string`, `normalize`,
  `add_co_occurrence` and `loading_dots`.
- `tiendainv.cli`: the `App` menus and `main`.

## What it does not do

Everything is held in memory for one session. Purchase history, units sold
and sales counts are not saved anywhere and are lost when the program ends;
the saved CSV holds prices, stock and barcodes only. In the menus the
inventory can be loaded once per session, and the inventory is saved to a
fixed file name.