"""
Domain errors for the cart, checkout and order services.

Every error is raised only after the operation has left state unchanged.
Routers turn them into HTTPException with a bilingual detail string.
"""


class MarketplaceError(Exception):
    status_code = 400
    message = "Request could not be completed"
    message_sw = "Ombi halikukamilika"

    def __init__(self, message: str = None, message_sw: str = None):
        if message:
            self.message = message
        if message_sw:
            self.message_sw = message_sw
        super().__init__(self.message)

    @property
    def detail(self) -> str:
        return f"{self.message_sw} ({self.message})"


class QuantityExceeded(MarketplaceError):
    status_code = 409
    message = "Quantity limit exceeded"
    message_sw = "Kiasi kimezidi kilichopo"


class EmptyCart(MarketplaceError):
    message = "Your cart is empty"
    message_sw = "Kikapu chako hakina bidhaa"


class MissingDeliveryLocation(MarketplaceError):
    message = "Please set a delivery location to continue"
    message_sw = "Tafadhali weka mahali pa kupeleka mzigo"


class LocationUnavailable(MarketplaceError):
    status_code = 422
    message = "Couldn't get your current location. Please enter manually"
    message_sw = "Imeshindikana kupata mahali ulipo. Tafadhali andika anwani"


class CheckoutInProgress(MarketplaceError):
    status_code = 409
    message = "A checkout is already in progress"
    message_sw = "Malipo yanaendelea tayari"


class CheckoutCancelled(MarketplaceError):
    status_code = 409
    message = "Checkout was cancelled"
    message_sw = "Malipo yamesitishwa"


class CheckoutFailed(MarketplaceError):
    status_code = 502
    message = "Your order could not be placed. Please try again"
    message_sw = "Oda yako haikuweza kuwekwa. Tafadhali jaribu tena"


class InvalidStatusTransition(MarketplaceError):
    status_code = 409
    message = "Order status cannot be changed"
    message_sw = "Hali ya oda haiwezi kubadilishwa"


# ─── Order backend errors ────────────────────────────────────────────────────


class BackendError(Exception):
    """Raised by an order backend when a submission does not go through."""


class TransientBackendError(BackendError):
    """Network hiccup or timeout; the submission may be retried."""


class OrderRejected(BackendError):
    """The backend refused the order (e.g. stock gone at commit time)."""
