"""
Failure taxonomy for storefront operations.

Every terminal outcome of a network operation is reported to the visitor
as a notice. The exceptions here classify what went wrong so the notice
layer can pick wording and severity without inspecting transport details.

Classes of failure:
- Refusal: the engine chose not to call the backend (missing login,
  duplicate add). Resolved locally.
- NotFound: the backend has nothing for the request (empty search,
  unknown product).
- BackendRejected: the backend refused the request with its own message.
- TransientFault: unreachable backend, 5xx, malformed payload.

No failure is retried automatically and none is fatal.
"""

from enum import Enum


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Local refusals
    VALIDATION_FAILED = "validation_failed"
    DUPLICATE_ITEM = "duplicate_item"
    AUTH_REQUIRED = "auth_required"

    # Resource failures
    NOT_FOUND = "not_found"
    EMPTY_RESULT = "empty_result"

    # Backend failures
    BACKEND_REJECTED = "backend_rejected"
    TRANSIENT_FAULT = "transient_fault"


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)


class RefusalError(Exception):
    """
    Exception for local refusals.

    Normally raised before any network call is made. The visitor can
    resolve it (log in, use the cart controls) and repeat the action.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)


class AuthRequiredError(RefusalError):
    """Raised when a cart operation is attempted without an auth token."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            kind=FailureKind.AUTH_REQUIRED,
            message="Login to add an item to the Cart",
            detail=detail,
            suggestion="Log in and try again.",
        )


class DuplicateCartItemError(RefusalError):
    """Raised when add is requested for a product that is already in the cart."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(
            kind=FailureKind.DUPLICATE_ITEM,
            message=(
                "Item already in cart. "
                "Use the cart sidebar to update quantity or remove item"
            ),
            detail=f"productId={product_id}",
        )


class InvalidQuantityError(RefusalError):
    """Raised when a negative quantity is requested. Zero is a valid removal."""

    def __init__(self, product_id: str, quantity: int) -> None:
        self.product_id = product_id
        self.quantity = quantity
        super().__init__(
            kind=FailureKind.VALIDATION_FAILED,
            message="Quantity cannot be negative",
            detail=f"productId={product_id} qty={quantity}",
        )


class CatalogNotFoundError(KnownError):
    """
    Raised when a catalog search matches nothing.

    Covers both an HTTP 404 from the search endpoint and an empty result
    list for a well-formed query.
    """

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(
            kind=FailureKind.EMPTY_RESULT,
            message="No products found",
            detail=f"query={query!r}",
            suggestion="Try a different search term.",
            status_code=404,
        )


class ProductNotFoundError(KnownError):
    """Raised when a cart mutation targets a product the backend does not know."""

    def __init__(self, product_id: str, message: str | None = None) -> None:
        self.product_id = product_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=message or "Product doesn't exist",
            detail=f"productId={product_id}",
            status_code=404,
        )


class BackendRejectedError(KnownError):
    """Raised when the backend refuses a request and explains why."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(
            kind=FailureKind.BACKEND_REJECTED,
            message=message,
            detail=f"HTTP {status_code}",
            status_code=status_code,
        )


class TransientFaultError(KnownError):
    """
    Raised when the backend is unreachable or answers with garbage.

    The operation that raised it left engine state untouched and can be
    repeated by the visitor.
    """

    def __init__(
        self,
        message: str = "Something went wrong. Check the backend console for more details",
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            kind=FailureKind.TRANSIENT_FAULT,
            message=message,
            detail=detail,
            suggestion="Check that the backend is running and reachable, then retry.",
            status_code=status_code,
        )
