"""Interactive menus for the store administrator and the customer."""

from __future__ import annotations

import argparse
import subprocess
import sys
import time
from collections.abc import Callable
from typing import TextIO

from tiendainv.inventory import FIELD_LENGTH, InventoryError, Product, Store
from tiendainv.reports import Report, apply_discount, build_report
from tiendainv.textutils import loading_dots, normalize

_LONG_RULE = "-" * 61
_SHORT_RULE = "-" * 29
_SUGGESTION_RULE = "-" * 59


def format_product(product: Product) -> str:
    """Full description of a product, as shown by the search by name."""
    return "\n".join(
        [
            f"Nombre: {product.name}",
            f"Marca: {product.brand}",
            f"Categoría: {product.category}",
            f"Código de barras: {product.barcode}",
            f"Stock: {product.stock}",
            f"Precio de venta: {product.sale_price:.2f}",
            f"Precio de mercado: {product.market_price:.2f}",
            f"Precio de costo: {product.cost_price:.2f}",
            f"Vendidos: {product.sold}",
            _SHORT_RULE,
        ]
    )


def _format_category_entry(product: Product) -> str:
    return "\n".join(
        [
            f"Nombre: {product.name}",
            f"Marca: {product.brand}",
            f"Código de Barras: {product.barcode}",
            f"Stock: {product.stock}",
            f"Precio Venta: {product.sale_price:.2f}",
            f"Precio Mercado: {product.market_price:.2f}",
            f"Precio Costo: {product.cost_price:.2f}",
            f"Vendidos: {product.sold}",
            _LONG_RULE,
        ]
    )


def _format_filter_entry(product: Product, with_sales: bool) -> str:
    lines = [
        f"Nombre: {product.name}",
        f"Categoría: {product.category}",
        f"Marca: {product.brand}",
        f"Código de Barras: {product.barcode}",
        f"Stock: {product.stock}",
        f"Precio Venta: {product.sale_price:.2f}",
    ]
    if with_sales:
        lines.append(f"Vendidos: {product.sold}")
    lines.append(_LONG_RULE)
    return "\n".join(lines)


def _parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _parse_float(text: str) -> float | None:
    try:
        return float(text.strip())
    except ValueError:
        return None


class App:
    """Text menus driving a :class:`Store`.

    ``input_func`` is called with no arguments and returns one line of input;
    it raises EOFError when input runs out, which ends :meth:`run`.
    """

    def __init__(
        self,
        store: Store | None = None,
        input_func: Callable[[], str] | None = None,
        output: TextIO | None = None,
    ) -> None:
        self.store = store if store is not None else Store()
        self._input = input_func if input_func is not None else input
        self._out = output if output is not None else sys.stdout
        self._interactive = output is None and sys.stdout.isatty()
        self._first_load = len(self.store.inventory) == 0

    # -- terminal helpers -------------------------------------------------

    def _print(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def _prompt(self, text: str) -> str:
        self._out.write(text)
        self._out.flush()
        return self._input()

    def _ask_text(self, text: str) -> str:
        return self._prompt(text).rstrip("\r\n")[:FIELD_LENGTH]

    def _ask_int(self, text: str) -> int | None:
        return _parse_int(self._prompt(text))

    def _ask_float(self, text: str) -> float | None:
        return _parse_float(self._prompt(text))

    def _ask_yes(self, text: str) -> bool:
        answer = self._prompt(text).strip()
        return answer[:1] in ("s", "S")

    def _sleep(self, seconds: float) -> None:
        if self._interactive:
            time.sleep(seconds)

    def _clear(self) -> None:
        if self._interactive:
            try:
                subprocess.run(["clear"], check=False)
            except OSError:
                pass

    def _pause(self) -> None:
        self._print("Presione una tecla para continuar...")
        self._input()
        self._clear()
        self._sleep(0.5)

    # -- main loop ---------------------------------------------------------

    def run(self) -> None:
        """Run the menus until the user leaves or input runs out."""
        try:
            self._main_loop()
        except EOFError:
            return

    def _main_loop(self) -> None:
        while True:
            self._print("\n=== Sistema de Gestión de Inventario ===")
            self._print("1. Administrador\n2. Cliente\n0. Salir")
            user_type = self._ask_int("Seleccione tipo de usuario: ")
            if user_type == 0:
                return
            if user_type == 1:
                self._admin_loop()
            elif user_type == 2:
                self._client_loop()
            else:
                self._print("Tipo de usuario no válido.")

    def _admin_loop(self) -> None:
        actions = {
            1: self._load_inventory,
            2: self._search_menu,
            3: self._modify_menu,
            4: self._save_inventory,
            5: self._report,
        }
        while True:
            self._clear()
            self._print("\n=== Menú Administrador ===")
            self._print("1. Cargar inventario")
            self._print("2. Métodos de búsqueda")
            self._print("3. Modificar inventario")
            self._print("4. Guardar inventario")
            self._print("5. Generar reporte completo")
            self._print("0. Salir")
            option = self._ask_int("Seleccione una opción: ")
            if option == 0:
                return
            action = actions.get(option)
            if action is None:
                self._print("Opción no válida.")
            else:
                action()

    def _client_loop(self) -> None:
        actions = {
            1: self._add_to_cart,
            2: self._remove_from_cart,
            3: self._view_cart,
            4: self._confirm_purchase,
        }
        while True:
            self._clear()
            self._print("\n=== Menú Cliente ===")
            self._print("1. Agregar al Carrito")
            self._print("2. Eliminar del Carrito")
            self._print("3. Ver Carrito (Productos)")
            self._print("4. Confirmar Compra")
            self._print("0. Salir")
            option = self._ask_int("Seleccione una opción: ")
            if option == 0:
                return
            action = actions.get(option)
            if action is None:
                self._print("Opción no válida.")
            else:
                action()

    # -- administrator -----------------------------------------------------

    def _load_inventory(self) -> None:
        self._clear()
        if not self._first_load:
            self._print("El inventario ya ha sido cargado.")
            self._print(
                "Si desea reiniciar el inventario, por favor cierre la aplicación "
                "y vuelva a abrirla."
            )
            self._pause()
            return
        path = self._prompt("Ingrese el nombre del archivo CSV para cargar el inventario: ")
        path = path.rstrip("\r\n")
        self._clear()
        self._out.write(f"Cargando inventario desde {path}")
        loading_dots(self._out, delay=0.5 if self._interactive else 0.0)
        self._sleep(2)
        self._clear()
        try:
            self.store.inventory.load_csv(path)
        except InventoryError as exc:
            self._print(str(exc))
            self._pause()
        else:
            self._print("Inventario cargado exitosamente")
            self._sleep(2)
        if len(self.store.inventory):
            self._first_load = False
        self._clear()

    def _search_menu(self) -> None:
        self._clear()
        self._print("\n=== Menú de Búsqueda ===")
        self._print("1. Buscar producto por nombre")
        self._print("2. Buscar productos por categoría")
        self._print("3. Mostrar stock de productos")
        self._print("4. Mostrar ventas de productos")
        self._print("0. Salir")
        option = self._ask_int("Seleccione una opción: ")
        if option == 1:
            self._search_by_name()
        elif option == 2:
            self._search_by_category()
        elif option == 3:
            self._filter_products(sales=False)
        elif option == 4:
            self._filter_products(sales=True)
        else:
            self._print("Opción no válida.")

    def _search_by_name(self) -> None:
        self._clear()
        name = normalize(self._ask_text("Ingrese el nombre del producto a buscar: "))
        found = self.store.inventory.find_by_name(name)
        if not found:
            self._print("Producto no encontrado.")
        for product in found:
            self._print()
            self._print(format_product(product))
        self._pause()

    def _search_by_category(self) -> None:
        self._clear()
        self._print("Categorías disponibles:")
        for category in self.store.inventory.categories():
            self._print(f"- {category}")
        category = normalize(self._ask_text("Ingrese la categoría de productos a listar: "))
        found = self.store.inventory.find_by_category(category)
        if not found:
            self._print(f"No se encontraron productos en la categoría '{category}'.")
            self._pause()
            return
        self._print(f"\nProductos en la categoría '{category}':")
        for product in found:
            self._print()
            self._print(_format_category_entry(product))
        self._pause()

    def _filter_products(self, sales: bool) -> None:
        self._clear()
        noun = "ventas" if sales else "stock"
        threshold = self._ask_int(f"Ingrese el umbral de {noun}: ")
        self._print("Seleccione una opción:")
        if sales:
            self._print("1. Ver productos con ventas menores o iguales al umbral")
            self._print("2. Ver productos con ventas mayores o iguales al umbral")
        else:
            self._print("1. Ver productos con stock menor o igual al umbral")
            self._print("2. Ver productos con stock mayor o igual al umbral")
        option = self._ask_int("Opción: ")
        self._clear()
        if threshold is None or option not in (1, 2):
            self._print("Opción no válida.")
            self._pause()
            return
        at_most = option == 1
        self._print(f"Productos con {noun} {'<=' if at_most else '>='} {threshold}:")
        inventory = self.store.inventory
        if sales:
            matches = inventory.filter_by_sales(threshold, at_most)
        else:
            matches = inventory.filter_by_stock(threshold, at_most)
        for product in matches:
            self._print()
            self._print(_format_filter_entry(product, with_sales=sales))
        if not matches:
            self._print("No se encontraron productos con las condiciones especificadas.")
        self._pause()

    def _modify_menu(self) -> None:
        self._clear()
        self._print("\n=== Menú de Modificación de Inventario ===")
        self._print("1. Registrar producto")
        self._print("2. Modificar stock de producto")
        self._print("3. Eliminar producto")
        self._print("0. Salir")
        option = self._ask_int("Seleccione una opción: ")
        if option == 1:
            self._register_product()
        elif option == 2:
            self._modify_stock()
        elif option == 3:
            self._remove_product()
        else:
            self._print("Opción no válida.")

    def _register_product(self) -> None:
        self._clear()
        self._print("=== Registro de Producto ===")
        name = self._ask_text("Ingrese el nombre del producto: ")
        brand = self._ask_text("Ingrese la marca del producto: ")
        category = self._ask_text("Ingrese la categoría del producto: ")
        barcode = self._ask_text("Ingrese el código de barras del producto: ")
        if self.store.inventory.get(barcode) is not None:
            self._print("El código de barras ya existe. No se puede registrar el producto.")
            self._pause()
            return
        stock = self._ask_int("Ingrese el stock del producto: ")
        sale = self._ask_float("Ingrese el precio de venta del producto: ")
        market = self._ask_float("Ingrese el precio de mercado del producto: ")
        cost = self._ask_float("Ingrese el precio de costo del producto: ")
        product = Product(
            name=name,
            brand=brand,
            category=category,
            barcode=barcode,
            stock=stock or 0,
            sale_price=sale or 0.0,
            market_price=market or 0.0,
            cost_price=cost or 0.0,
        )
        self.store.inventory.add(product)
        self._print("Producto registrado exitosamente.")
        self._pause()

    def _modify_stock(self) -> None:
        self._clear()
        code = self._ask_text("Ingrese el código de barras del producto a modificar: ")
        product = self.store.inventory.get(code)
        if product is None:
            self._print("Producto no encontrado.")
            self._pause()
            return
        self._print(f"Stock actual: {product.stock}")
        new_stock = self._ask_int("Ingrese el nuevo stock: ")
        if new_stock is None:
            self._print("Opción no válida.")
            self._pause()
            return
        self.store.inventory.set_stock(code, new_stock)
        self._print("Stock actualizado correctamente.")
        self._pause()

    def _remove_product(self) -> None:
        self._clear()
        code = self._ask_text("Ingrese el código de barras del producto a eliminar: ")
        try:
            self.store.inventory.remove(code)
        except InventoryError as exc:
            self._print(str(exc))
        else:
            self._print("Producto eliminado correctamente.")
        self._pause()

    def _save_inventory(self) -> None:
        self._clear()
        try:
            path = self.store.inventory.save_csv()
        except InventoryError as exc:
            self._print(str(exc))
        else:
            self._print(f"Inventario guardado en '{path}'.")
        self._pause()

    def _report(self) -> None:
        self._clear()
        try:
            report = build_report(self.store)
        except InventoryError as exc:
            self._print(str(exc))
            self._pause()
            return
        self._print("=== Generación de Reporte Completo ===")
        if report.top_sellers:
            self._print("Top 3 productos más vendidos:")
            for number, rank in enumerate(report.top_sellers, start=1):
                self._print(f"{number}. {rank.name} - Ventas: {rank.sales}")
        if report.combos:
            self._print("=== Combos frecuentes detectados ===")
            for number, combo in enumerate(report.combos, start=1):
                self._print(
                    f"{number}. {combo.name_a} + {combo.name_b} → "
                    f"Comprados juntos {combo.frequency} veces"
                )
        self._show_suggestions(report)
        if self._ask_yes("¿Quieres hacer un descuento a los productos con bajas ventas? (s/n): "):
            self._discount(report)
        else:
            self._print("No se aplicarán descuentos.")
        self._pause()

    def _show_suggestions(self, report: Report) -> None:
        self._print("\n\n=== Productos con pocas ventas: Sugerencias de promoción ===")
        for number, suggestion in enumerate(report.suggestions, start=1):
            product = suggestion.product
            self._print("\nProducto con bajas ventas detectado:")
            self._print(
                f"{number})Nombre: {product.name} | Marca: {product.brand} | "
                f"Vendidos: {product.sold} | Stock actual: {product.stock}"
            )
            self._print(f"→ Sugerencia: aplicar {suggestion.discount_percent}% de descuento.")
            partner = suggestion.combo_partner
            if partner is not None:
                self._print(
                    f"→ Sugerencia: crear combo con '{partner.name}' (vendidos: {partner.sold})"
                )
            self._print("→ Acción sugerida: aplicar descuento o visibilidad en la tienda.")
            self._print(_SUGGESTION_RULE)
        self._pause()

    def _discount(self, report: Report) -> None:
        candidates = report.discount_candidates
        choice = self._ask_int(
            "Ingrese el número del producto al cual quiera aplicar un descuento: "
        )
        if choice is None or choice <= 0 or choice > len(candidates):
            self._print("Opción inválida.")
            self._pause()
            return
        product = candidates[choice - 1]
        self._print(
            f"Producto seleccionado: {product.name} | Precio actual: {product.sale_price:.2f}"
        )
        percentage = self._ask_float(
            "Ingrese el porcentaje de descuento (ejemplo: 10 para 10%): "
        )
        try:
            new_price = apply_discount(product, percentage if percentage is not None else 0.0)
        except InventoryError as exc:
            self._print(str(exc))
            self._pause()
            return
        self._print(f"Descuento aplicado. Nuevo precio: {new_price:.2f}")

    # -- customer ----------------------------------------------------------

    def _add_to_cart(self) -> None:
        self._clear()
        code = self._ask_text("Ingrese el código de barras del producto a agregar: ")
        product = self.store.inventory.get(code)
        if product is None:
            self._print("Producto no encontrado.")
            self._pause()
            return
        if product.stock <= 0:
            self._print("No hay stock disponible para este producto.")
            self._pause()
            return
        quantity = self._ask_int("Ingrese la cantidad a agregar: ")
        try:
            self.store.cart.add(self.store.inventory, code, quantity if quantity is not None else 0)
        except InventoryError as exc:
            self._print(str(exc))
        else:
            self._print("Producto agregado al carrito.")
        self._pause()

    def _remove_from_cart(self) -> None:
        self._clear()
        cart = self.store.cart
        if not len(cart):
            self._print("El carrito está vacío.")
            self._pause()
            return
        self._print("Productos en el carrito:")
        for number, line in enumerate(cart, start=1):
            self._print(f"{number}. {line.name} | Marca: {line.brand} | Cantidad: {line.quantity}")
        position = self._ask_int("Ingrese el número del producto a eliminar: ")
        try:
            cart.remove(position if position is not None else 0)
        except InventoryError as exc:
            self._print(str(exc))
        else:
            self._print("Producto eliminado del carrito.")
        self._pause()

    def _view_cart(self) -> None:
        self._clear()
        cart = self.store.cart
        if not len(cart):
            self._print("El carrito está vacío.")
            self._pause()
            return
        self._print("Productos en el carrito:")
        for number, line in enumerate(cart, start=1):
            self._print(
                f"{number}. {line.name} | Marca: {line.brand} | Cantidad: {line.quantity} | "
                f"Precio unitario: {line.unit_price:.2f} | Subtotal: {line.subtotal:.2f}"
            )
        self._print(f"Total: {cart.total():.2f}")
        self._pause()

    def _confirm_purchase(self) -> None:
        self._clear()
        cart = self.store.cart
        if not len(cart):
            self._print("El carrito está vacío. No se puede confirmar la compra.")
            self._pause()
            return
        self._print("Productos en el carrito:")
        for line in cart:
            self._print(
                f"- {line.name} | Marca: {line.brand} | Cantidad: {line.quantity} | "
                f"Precio unitario: {line.unit_price:.2f}"
            )
        self._print(f"Total de la compra: {cart.total():.2f}")
        if not self._ask_yes("\nConfirmar compra? (s/n): "):
            self._print("Compra cancelada.")
            self._pause()
            return
        self.store.confirm_purchase()
        self._print("Compra confirmada exitosamente.")
        self._pause()


def main(argv: list[str] | None = None) -> int:
    """Start the interactive store."""
    parser = argparse.ArgumentParser(
        prog="tiendainv", description="Sistema de Gestión de Inventario"
    )
    parser.parse_args(argv)
    App(Store()).run()
    return 0