"""Product inventory with name, category and barcode indexes, a cart and purchases."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from tiendainv.hashmap import DEFAULT_CAPACITY, HashMap
from tiendainv.textutils import normalize, parse_csv_line

FIELD_LENGTH = 50
DEFAULT_SAVE_PATH = "inventario_guardado.csv"
SAVE_HEADER = (
    "ID, Nombre, Marca, Categoria, PrecioVenta, PrecioMercado,PrecioCosto,Stock,CodigoBarras"
)

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


class InventoryError(Exception):
    """Raised when an inventory, cart or purchase operation cannot be done."""


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


@dataclass
class Product:
    """One product held in the inventory."""

    name: str
    brand: str
    category: str
    barcode: str
    stock: int = 0
    sale_price: float = 0.0
    market_price: float = 0.0
    cost_price: float = 0.0
    sold: int = 0


@dataclass
class CartLine:
    """A product placed in the cart, with its price at the time it was added."""

    name: str
    brand: str
    category: str
    barcode: str
    unit_price: float
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity


class Inventory:
    """Products indexed by barcode, by name and by category."""

    def __init__(self) -> None:
        self._by_code = HashMap(DEFAULT_CAPACITY)
        self._by_name = HashMap(DEFAULT_CAPACITY)
        self._by_category = HashMap(DEFAULT_CAPACITY)

    def __len__(self) -> int:
        return len(self._by_code)

    def _index(self, product: Product) -> None:
        if product.barcode not in self._by_code:
            self._by_code[product.barcode] = product
        self._by_name.setdefault(product.name, []).append(product)
        self._by_category.setdefault(product.category, []).append(product)

    def load_csv(self, path: str | Path) -> int:
        """Load products from a CSV file whose first line is a header.

        Rows with fewer than nine fields are skipped. Returns the number of
        rows taken in.
        """
        try:
            with open(path, encoding="utf-8", newline="") as handle:
                lines = handle.readlines()
        except OSError as exc:
            raise InventoryError(f"Error al abrir el archivo: {exc}") from exc
        loaded = 0
        for line in lines[1:]:
            fields = parse_csv_line(line, ",")
            if len(fields) < 9:
                continue
            product = Product(
                name=normalize(fields[1])[:FIELD_LENGTH],
                brand=normalize(fields[2])[:FIELD_LENGTH],
                category=normalize(fields[3])[:FIELD_LENGTH],
                barcode=fields[8][:FIELD_LENGTH],
                stock=_leading_int(fields[7]),
                sale_price=_leading_float(fields[4]),
                market_price=_leading_float(fields[5]),
                cost_price=_leading_float(fields[6]),
            )
            self._index(product)
            loaded += 1
        return loaded

    def add(self, product: Product) -> None:
        """Register a new product; its barcode must not be in use."""
        if product.barcode in self._by_code:
            raise InventoryError(
                "El código de barras ya existe. No se puede registrar el producto."
            )
        self._index(product)

    def get(self, code: str) -> Product | None:
        """Return the product with barcode ``code``, or None."""
        return self._by_code.get(code)

    def products(self) -> list[Product]:
        """All products, one per barcode, in table order."""
        return list(self._by_code.values())

    def categories(self) -> list[str]:
        """Names of the categories that hold products."""
        return list(self._by_category)

    def find_by_name(self, name: str) -> list[Product]:
        """Products whose normalised name matches ``name``."""
        return list(self._by_name.get(normalize(name), []))

    def find_by_category(self, category: str) -> list[Product]:
        """Products in the category matching ``category``."""
        return list(self._by_category.get(normalize(category), []))

    def filter_by_stock(self, threshold: int, at_most: bool = True) -> list[Product]:
        """Products with stock at most (or at least) ``threshold``."""
        if at_most:
            return [p for p in self.products() if p.stock <= threshold]
        return [p for p in self.products() if p.stock >= threshold]

    def filter_by_sales(self, threshold: int, at_most: bool = True) -> list[Product]:
        """Products with units sold at most (or at least) ``threshold``."""
        if at_most:
            return [p for p in self.products() if p.sold <= threshold]
        return [p for p in self.products() if p.sold >= threshold]

    def set_stock(self, code: str, stock: int) -> Product:
        """Set the stock of the product with barcode ``code``."""
        product = self.get(code)
        if product is None:
            raise InventoryError("Producto no encontrado.")
        product.stock = stock
        return product

    @staticmethod
    def _drop_from(index: HashMap, key: str, code: str) -> None:
        entries = index.get(key)
        if entries is None:
            return
        position = next((i for i, p in enumerate(entries) if p.barcode == code), None)
        if position is not None:
            del entries[position]
        if not entries:
            del index[key]

    def remove(self, code: str) -> Product:
        """Remove the product with barcode ``code`` from every index."""
        product = self.get(code)
        if product is None:
            raise InventoryError("Producto no encontrado.")
        self._drop_from(self._by_category, product.category, code)
        self._drop_from(self._by_name, product.name, code)
        del self._by_code[code]
        return product

    def save_csv(self, path: str | Path = DEFAULT_SAVE_PATH) -> Path:
        """Write every product to a CSV file and return its path."""
        target = Path(path)
        try:
            with open(target, "w", encoding="utf-8", newline="") as handle:
                handle.write(SAVE_HEADER + "\n")
                for number, p in enumerate(self.products(), start=1):
                    handle.write(
                        f"{number},{p.name},{p.brand},{p.category},"
                        f"{p.sale_price:.2f},{p.market_price:.2f},{p.cost_price:.2f},"
                        f"{p.stock},{p.barcode}\n"
                    )
        except OSError as exc:
            raise InventoryError("No se pudo abrir el archivo para guardar.") from exc
        return target


class Cart:
    """Products a customer intends to buy."""

    def __init__(self) -> None:
        self._lines: list[CartLine] = []

    def add(self, inventory: Inventory, code: str, quantity: int) -> CartLine:
        """Take ``quantity`` units of a product out of stock and into the cart."""
        product = inventory.get(code)
        if product is None:
            raise InventoryError("Producto no encontrado.")
        if product.stock <= 0:
            raise InventoryError("No hay stock disponible para este producto.")
        if quantity <= 0 or quantity > product.stock:
            raise InventoryError("Cantidad inválida o insuficiente stock.")
        line = CartLine(
            name=product.name,
            brand=product.brand,
            category=product.category,
            barcode=product.barcode,
            unit_price=product.sale_price,
            quantity=quantity,
        )
        self._lines.append(line)
        product.stock -= quantity
        return line

    def remove(self, position: int) -> CartLine:
        """Remove the line at 1-based ``position``."""
        if not self._lines:
            raise InventoryError("El carrito está vacío.")
        if position < 1 or position > len(self._lines):
            raise InventoryError("Opción inválida.")
        return self._lines.pop(position - 1)

    def total(self) -> float:
        return sum(line.subtotal for line in self._lines)

    def clear(self) -> None:
        self._lines.clear()

    def __iter__(self) -> Iterator[CartLine]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)


@dataclass
class Store:
    """The inventory together with the cart, purchase history and sales counts."""

    inventory: Inventory = field(default_factory=Inventory)
    cart: Cart = field(default_factory=Cart)
    history: list[list[Product]] = field(default_factory=list)
    sales_counter: HashMap = field(default_factory=lambda: HashMap(DEFAULT_CAPACITY))

    def confirm_purchase(self) -> list[Product]:
        """Record the cart as a purchase, empty it and return the products bought."""
        if not len(self.cart):
            raise InventoryError("El carrito está vacío. No se puede confirmar la compra.")
        purchase: list[Product] = []
        for line in self.cart:
            self.sales_counter[line.name] = self.sales_counter.get(line.name, 0) + line.quantity
            product = self.inventory.get(line.barcode)
            if product is not None:
                product.sold += line.quantity
                purchase.append(product)
        self.history.append(purchase)
        self.cart.clear()
        return purchase