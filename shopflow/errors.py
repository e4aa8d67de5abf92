"""
Error taxonomy.

User-facing errors carry the i18n key of the notice shown for them.
InvalidPriceError is the exception: it signals a broken data contract from
the listing side and is never shown to the user as a notice.
"""

# Translation keys for user-visible notices
NOTICE_INCOMPLETE_INPUT = "auth.incomplete_input"
NOTICE_INVALID_CREDENTIALS = "auth.invalid_credentials"
NOTICE_CART_EMPTY = "cart.empty"
NOTICE_ITEM_REMOVED = "cart.item_removed"
NOTICE_CHECKOUT_EMPTY = "checkout.empty_cart"
NOTICE_CHECKOUT_SUCCESS = "checkout.success"

# Generic errors
ERROR_INVALID_SESSION = "Invalid session or expired"
ERROR_PRODUCT_NOT_FOUND = "Product not found"


class ShopflowError(Exception):
    """Base class for all shopflow domain errors."""

    code = "shopflow_error"
    message_key: str | None = None

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class IncompleteInputError(ShopflowError):
    code = "incomplete_input"
    message_key = NOTICE_INCOMPLETE_INPUT


class InvalidCredentialsError(ShopflowError):
    code = "invalid_credentials"
    message_key = NOTICE_INVALID_CREDENTIALS


class EmptyCartError(ShopflowError):
    code = "empty_cart"
    message_key = NOTICE_CHECKOUT_EMPTY


class InvalidPriceError(ShopflowError, ValueError):
    """Price string that is not a currency symbol followed by a number."""

    code = "invalid_price"


class ProductNotFoundError(ShopflowError):
    code = "product_not_found"


class ScreenStateError(ShopflowError):
    """Action requested on a screen that is not the current one."""

    code = "wrong_screen"
