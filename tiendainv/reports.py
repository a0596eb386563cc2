"""Sales reports: best sellers, frequent combos and promotion suggestions."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from tiendainv.hashmap import DEFAULT_CAPACITY, HashMap
from tiendainv.inventory import Inventory, InventoryError, Product, Store
from tiendainv.textutils import add_co_occurrence

TOP_LIMIT = 3
LOW_SALES_THRESHOLD = 3
SUGGESTION_LIMIT = 10
COMBO_SALES_GAP = 5
HIGH_MARGIN_RATIO = 1.5
HIGH_MARGIN_DISCOUNT = 10
LOW_MARGIN_DISCOUNT = 5


@dataclass(frozen=True)
class SellerRank:
    """A product name and the units sold under it."""

    name: str
    sales: int


@dataclass(frozen=True)
class Combo:
    """Two product names and how many purchases held both."""

    name_a: str
    name_b: str
    frequency: int


@dataclass
class Suggestion:
    """A product with low sales, the discount suggested and a combo partner."""

    product: Product
    discount_percent: int
    combo_partner: Product | None = None


@dataclass
class Report:
    """Everything the full sales report shows."""

    top_sellers: list[SellerRank] = field(default_factory=list)
    combos: list[Combo] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)

    @property
    def discount_candidates(self) -> list[Product]:
        """Products that may receive a discount, in suggestion order."""
        return [suggestion.product for suggestion in self.suggestions]


def top_sellers(sales_counter: Mapping[str, int], limit: int = TOP_LIMIT) -> list[SellerRank]:
    """The ``limit`` names with the most units sold, highest first."""
    totals: dict[str, int] = {}
    for name, sales in sales_counter.items():
        totals[name] = totals.get(name, 0) + sales
    ranked = sorted(
        (SellerRank(name, sales) for name, sales in totals.items()),
        key=lambda rank: rank.sales,
        reverse=True,
    )
    return ranked[:limit]


def co_purchase_graph(history: Iterable[Iterable[Product]]) -> HashMap:
    """Map each product name to the names bought with it and how often."""
    graph = HashMap(DEFAULT_CAPACITY)
    for purchase in history:
        products = list(purchase)
        for position, first in enumerate(products):
            for second in products[position + 1:]:
                if first.barcode == second.barcode:
                    continue
                add_co_occurrence(graph, first.name, second.name)
                add_co_occurrence(graph, second.name, first.name)
    return graph


def frequent_combos(history: Iterable[Iterable[Product]], limit: int = TOP_LIMIT) -> list[Combo]:
    """The ``limit`` pairs of names most often bought together, highest first."""
    graph = co_purchase_graph(history)
    combos = [
        Combo(name_a, name_b, frequency)
        for name_a, neighbours in graph.items()
        for name_b, frequency in neighbours.items()
    ]
    combos.sort(key=lambda combo: combo.frequency, reverse=True)
    return combos[:limit]


def _price_ratio(sale_price: float, cost_price: float) -> float:
    if cost_price == 0:
        if sale_price == 0:
            return math.nan
        return math.copysign(math.inf, sale_price)
    return sale_price / cost_price


def low_sales_suggestions(
    inventory: Inventory,
    threshold: int = LOW_SALES_THRESHOLD,
    limit: int = SUGGESTION_LIMIT,
) -> list[Suggestion]:
    """Suggest a discount and a combo partner for up to ``limit`` slow sellers."""
    suggestions: list[Suggestion] = []
    for product in inventory.products():
        if len(suggestions) >= limit:
            break
        if product.sold > threshold:
            continue
        ratio = _price_ratio(product.sale_price, product.cost_price)
        discount = HIGH_MARGIN_DISCOUNT if ratio > HIGH_MARGIN_RATIO else LOW_MARGIN_DISCOUNT
        partner = next(
            (
                candidate
                for candidate in inventory.find_by_category(product.category)
                if candidate is not product
                and candidate.sold - product.sold <= COMBO_SALES_GAP
                and candidate.category == product.category
            ),
            None,
        )
        suggestions.append(Suggestion(product, discount, partner))
    return suggestions


def apply_discount(product: Product, percentage: float) -> float:
    """Lower the sale price of ``product`` by ``percentage`` and return the new price."""
    if percentage <= 0 or percentage > 100:
        raise InventoryError("Porcentaje de descuento inválido.")
    product.sale_price *= 1 - percentage / 100.0
    return product.sale_price


def build_report(store: Store) -> Report:
    """Assemble the full report for ``store``; it needs at least one purchase."""
    if not store.history:
        raise InventoryError("No hay historial de compras para generar un reporte.")
    return Report(
        top_sellers=top_sellers(store.sales_counter),
        combos=frequent_combos(store.history),
        suggestions=low_sales_suggestions(store.inventory),
    )