"""Domain exceptions.

All domain-level errors that represent business rule violations.
Hierarchy traversal itself never raises: missing relations fall back,
cycles terminate and out-of-range lookups return ``None``. These
exceptions cover the write and lookup paths around it.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Catalogue Errors
# ============================================================================


class CatalogueError(DomainError):
    """Base class for catalogue-related errors."""

    pass


class ProductNotFoundError(CatalogueError):
    """Raised when a product cannot be found by identity."""

    def __init__(self, product_id: int) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID that was looked up.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id},
        )


class CategoryNotFoundError(CatalogueError):
    """Raised when a category cannot be found by identity."""

    def __init__(self, category_id: int) -> None:
        """Initialize category not found error.

        Args:
            category_id: ID that was looked up.
        """
        super().__init__(
            f"Category {category_id} not found",
            details={"category_id": category_id},
        )


class ProductNotPersistedError(CatalogueError):
    """Raised when an operation needs an identity the product does not have yet."""

    def __init__(self, title: str) -> None:
        super().__init__(
            f"Product '{title}' has no identity; write it first",
            details={"title": title},
        )


class RequiredFieldError(CatalogueError):
    """Raised when a required field is missing on write."""

    def __init__(self, entity_type: str, field_name: str) -> None:
        """Initialize required field error.

        Args:
            entity_type: Type of entity (e.g., "Product", "Category").
            field_name: Name of the missing field.
        """
        super().__init__(
            f"{entity_type} field '{field_name}' is required",
            details={"entity_type": entity_type, "field": field_name},
        )


class InvalidCategoryHierarchyError(CatalogueError):
    """Raised when a category parent assignment is rejected."""

    def __init__(self, category_id: int | None, parent_id: int | None, reason: str) -> None:
        """Initialize invalid hierarchy error.

        Args:
            category_id: Category being edited.
            parent_id: Requested parent.
            reason: Explanation of the rejection.
        """
        super().__init__(
            reason,
            details={"category_id": category_id, "parent_id": parent_id},
        )


# ============================================================================
# Permission Errors
# ============================================================================


class PermissionDeniedError(DomainError):
    """Raised by the application layer when a permission check returns False."""

    def __init__(self, action: str, entity_type: str, member_id: int | None) -> None:
        """Initialize permission denied error.

        Args:
            action: Attempted action ("create", "edit", "delete").
            entity_type: Type of entity acted on.
            member_id: Caller identity, if any.
        """
        super().__init__(
            f"Member {member_id} may not {action} {entity_type}",
            details={
                "action": action,
                "entity_type": entity_type,
                "member_id": member_id,
            },
        )


# ============================================================================
# Money Errors
# ============================================================================


class MoneyError(DomainError):
    """Base class for money-related errors."""

    pass


class NegativeMoneyError(MoneyError):
    """Raised when attempting to create money with negative amount."""

    def __init__(self, amount: int) -> None:
        """Initialize negative money error.

        Args:
            amount: The negative amount in cents.
        """
        super().__init__(
            f"Money amount cannot be negative: {amount}",
            details={"amount": amount},
        )
