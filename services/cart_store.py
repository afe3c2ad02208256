"""
Cart Store - kikapu cha mnunuzi
Holds the buyer's line items and enforces per-crop availability limits.
"""

from models.cart import CartItem
from models.crop import Crop
from services.errors import QuantityExceeded
from services.notifier import Notifier


class CartStore:
    """In-session cart, one line item per crop id, in insertion order.

    Every rejected mutation raises QuantityExceeded and leaves the items
    untouched. Totals are recomputed on every read.
    """

    def __init__(self, notifier: Notifier):
        self._notifier = notifier
        self._items: list[CartItem] = []

    @property
    def items(self) -> list[CartItem]:
        return [item.model_copy(deep=True) for item in self._items]

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def subtotal(self) -> float:
        return sum(item.crop.price_per_unit * item.quantity for item in self._items)

    def __len__(self):
        return len(self._items)

    def _find(self, crop_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.crop.id == crop_id:
                return index
        return -1

    def _reject(self, crop: Crop, message: str, message_sw: str):
        self._notifier.notify(
            title="Quantity Limit Exceeded",
            title_sw="Kiasi kimezidi",
            message=message,
            message_sw=message_sw,
            variant="destructive",
            related_id=crop.id,
        )
        raise QuantityExceeded(message, message_sw)

    def add_to_cart(self, crop: Crop, quantity: int) -> CartItem:
        if quantity > crop.quantity_available:
            self._reject(
                crop,
                f"Only {crop.quantity_available} {crop.unit} available.",
                f"Zipo {crop.quantity_available} {crop.unit} tu.",
            )

        index = self._find(crop.id)
        if index >= 0:
            new_quantity = self._items[index].quantity + quantity
            if new_quantity > crop.quantity_available:
                self._reject(
                    crop,
                    f"You can't add more than {crop.quantity_available} {crop.unit} of this crop.",
                    f"Huwezi kuongeza zaidi ya {crop.quantity_available} {crop.unit} ya zao hili.",
                )
            updated = self._items[index].model_copy(update={"quantity": new_quantity})
            self._items[index] = updated
            self._notifier.notify(
                title="Cart Updated",
                title_sw="Kikapu kimesasishwa",
                message=f"Quantity of {crop.name} updated to {new_quantity}.",
                related_id=crop.id,
            )
            return updated

        item = CartItem(crop=crop, quantity=quantity, unit=crop.unit)
        self._items.append(item)
        self._notifier.notify(
            title="Added to Cart",
            title_sw="Imeongezwa kwenye kikapu",
            message=f"{quantity} {crop.unit} of {crop.name} added.",
            related_id=crop.id,
        )
        return item

    def remove_from_cart(self, crop_id: str):
        """Remove a crop's line item. Removing an absent crop is a no-op."""
        self._items = [item for item in self._items if item.crop.id != crop_id]
        self._notifier.notify(
            title="Removed from Cart",
            title_sw="Imeondolewa kwenye kikapu",
            message="Item removed from your cart.",
            related_id=crop_id,
        )

    def update_quantity(self, crop_id: str, quantity: int) -> CartItem | None:
        if quantity <= 0:
            self.remove_from_cart(crop_id)
            return None

        index = self._find(crop_id)
        if index == -1:
            return None

        crop = self._items[index].crop
        if quantity > crop.quantity_available:
            self._reject(
                crop,
                f"Only {crop.quantity_available} {crop.unit} available.",
                f"Zipo {crop.quantity_available} {crop.unit} tu.",
            )

        updated = self._items[index].model_copy(update={"quantity": quantity})
        self._items[index] = updated
        self._notifier.notify(
            title="Cart Updated",
            title_sw="Kikapu kimesasishwa",
            message=f"Quantity of {crop.name} updated to {quantity}.",
            related_id=crop.id,
        )
        return updated

    def clear_cart(self):
        self._items = []
