"""
Session cart.

Cart lines are stored in request.session['cart'] as {"<product uuid>": quantity}.
Prices are not tracked here: the cart only answers what is in it.
"""
from .models import Product, ProductType

SESSION_KEY = 'cart'


class SessionCart:

    def __init__(self, request: object):
        self.session = getattr(request, 'session', None)

    def _lines(self) -> dict:
        if self.session is None:
            return {}
        return self.session.get(SESSION_KEY, {})

    def _save(self, lines: dict) -> None:
        self.session[SESSION_KEY] = lines
        self.session.modified = True

    def add(self, product: Product, quantity: int = 1) -> None:
        lines = dict(self._lines())
        key = str(product.id)
        lines[key] = lines.get(key, 0) + max(1, int(quantity))
        self._save(lines)

    def remove(self, product_id) -> None:
        lines = dict(self._lines())
        lines.pop(str(product_id), None)
        self._save(lines)

    def clear(self) -> None:
        if self.session is None:
            return
        self.session.pop(SESSION_KEY, None)
        self.session.modified = True

    def products(self):
        return Product.objects.active().filter(id__in=list(self._lines()))

    def items(self) -> list:
        lines = self._lines()
        return [
            {'product': product, 'quantity': lines[str(product.id)]}
            for product in self.products()
        ]

    def cart_is_empty(self) -> bool:
        return not self.products().exists()

    def cart_has_bookable_item(self) -> bool:
        return self.products().filter(product_type=ProductType.BOOKING).exists()
