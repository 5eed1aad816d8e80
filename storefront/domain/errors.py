# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base class of everything the cart and order layers raise on purpose."""


class NotFound(StorefrontError, ValueError):
    """Referenced product, order or address does not exist."""


class Conflict(StorefrontError):
    """A uniqueness or state constraint rejected the write."""


class TransientIO(StorefrontError):
    """Backend (database, key-value store, broker) failure."""


class OrderPlacementError(TransientIO):
    """Order could not be written; nothing was committed and the cart is intact."""


class Unauthorized(StorefrontError, PermissionError):
    """Missing sign-in or admin role."""
