# app/client/cart.py
import json

from pydantic import TypeAdapter
from sqlmodel import SQLModel, Field

from app.client.catalog import Product
from app.client.local_store import LocalStore

CART_STORAGE_KEY = "woodlandCart"


class CartItem(SQLModel):
    """
    Shopping cart entry. One entry per product; quantity is always >= 1.
    """

    id: str
    name: str
    price: float
    image: str
    description: str = ""
    quantity: int = Field(gt=0)


class CartSummary(SQLModel):
    """
    Cart contents with derived totals.
    """

    items: list[CartItem]
    total_quantity: int
    total_price: float


_items_adapter = TypeAdapter(list[CartItem])


class Cart:
    """
    Client-local shopping cart.

    Rules:
      - adding a product already in the cart increments its quantity
      - quantity changes clamp at zero and zero-quantity items are dropped
      - totals are computed from the items on every read
      - every mutation rewrites the stored cart under CART_STORAGE_KEY
    """

    def __init__(self, store: LocalStore):
        self.store = store
        self.items: list[CartItem] = self._load()

    # ---- persistence ----

    def _load(self) -> list[CartItem]:
        raw = self.store.get_item(CART_STORAGE_KEY)
        if not raw:
            return []
        return _items_adapter.validate_json(raw)

    def _save(self) -> None:
        self.store.set_item(
            CART_STORAGE_KEY,
            json.dumps([item.model_dump() for item in self.items]),
        )

    # ---- queries ----

    def get_item(self, product_id: str) -> CartItem | None:
        return next((it for it in self.items if it.id == product_id), None)

    @property
    def total_price(self) -> float:
        return sum(item.price * item.quantity for item in self.items)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def summary(self) -> CartSummary:
        return CartSummary(
            items=list(self.items),
            total_quantity=self.total_items,
            total_price=self.total_price,
        )

    # ---- mutations ----

    def add(self, product: Product) -> CartItem:
        existing = self.get_item(product.id)
        if existing:
            existing.quantity += 1
            item = existing
        else:
            item = CartItem(**product.model_dump(), quantity=1)
            self.items.append(item)
        self._save()
        return item

    def update_quantity(self, product_id: str, change: int) -> None:
        """
        Add `change` (may be negative) to an item's quantity.

        Never goes below zero; an item that reaches zero leaves the cart.
        """
        for item in self.items:
            if item.id == product_id:
                item.quantity = max(0, item.quantity + change)
        self.items = [item for item in self.items if item.quantity > 0]
        self._save()

    def remove(self, product_id: str) -> None:
        self.items = [item for item in self.items if item.id != product_id]
        self._save()

    def clear(self) -> None:
        self.items = []
        self._save()
