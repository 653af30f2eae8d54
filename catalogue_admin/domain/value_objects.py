"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self

from catalogue_admin.domain.base import ValueObject
from catalogue_admin.domain.exceptions import NegativeMoneyError


# ============================================================================
# Money Value Object
# ============================================================================


@dataclass(frozen=True)
class Money(ValueObject):
    """Represents a product price with currency.

    Money is stored in the smallest currency unit (cents for USD/EUR)
    to avoid floating-point precision issues. Tax is not modelled here.

    Attributes:
        amount_cents: Amount in smallest currency unit (e.g., cents).
        currency: ISO 4217 currency code (e.g., 'USD', 'EUR').
    """

    amount_cents: int
    currency: str = "USD"

    def __post_init__(self) -> None:
        """Validate money constraints."""
        if self.amount_cents < 0:
            raise NegativeMoneyError(self.amount_cents)
        # Normalize currency to uppercase
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def zero(cls, currency: str = "USD") -> Self:
        """Create zero amount money.

        Args:
            currency: Currency code.

        Returns:
            Money with zero amount.
        """
        return cls(amount_cents=0, currency=currency)

    @classmethod
    def from_decimal(cls, amount: Decimal, currency: str = "USD") -> Self:
        """Create money from decimal amount.

        Args:
            amount: Decimal amount in major units (e.g., dollars).
            currency: Currency code.

        Returns:
            Money instance.
        """
        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return cls(amount_cents=cents, currency=currency)

    def to_decimal(self) -> Decimal:
        """Convert to decimal amount in major units.

        Returns:
            Decimal amount (e.g., dollars from cents).
        """
        return Decimal(self.amount_cents) / 100

    def __str__(self) -> str:
        """Return formatted string representation.

        Returns:
            Formatted money string (e.g., '$12.99 USD').
        """
        symbol = {"USD": "$", "EUR": "€", "GBP": "£"}.get(self.currency, "")
        return f"{symbol}{self.to_decimal():.2f} {self.currency}"


# ============================================================================
# Image Reference
# ============================================================================


@dataclass(frozen=True)
class ImageRef(ValueObject):
    """Reference to a stored image file.

    The catalogue never reads or transforms image data; it only hands
    references to the presentation layer.

    Attributes:
        name: File name (e.g., "blue-suede-shoes.jpg").
        url: Public URL of the file.
        id: Storage identity, None for generated placeholders.
    """

    name: str
    url: str
    id: int | None = None

    def exists(self) -> bool:
        """Check whether this reference points at a file.

        Returns:
            True if both name and url are set.
        """
        return bool(self.name and self.url)


# ============================================================================
# Breadcrumbs
# ============================================================================


@dataclass(frozen=True)
class BreadcrumbEntry(ValueObject):
    """One step of a breadcrumb trail, ready for a template.

    Attributes:
        title: Display title (not escaped).
        link: Relative or absolute link to the entity.
    """

    title: str
    link: str


# ============================================================================
# Caller Identity
# ============================================================================


@dataclass(frozen=True)
class Member(ValueObject):
    """Identity of the caller performing an admin operation.

    Attributes:
        id: Member identifier known to the permission collaborator.
        groups: Group codes the member belongs to.
    """

    id: int
    groups: frozenset[str] = field(default_factory=frozenset)


# ============================================================================
# Site Configuration
# ============================================================================


class ViewAccess(str, Enum):
    """Who may view catalogue pages."""

    ANYONE = "Anyone"
    LOGGED_IN_USERS = "LoggedInUsers"
    ONLY_THESE_USERS = "OnlyTheseUsers"


@dataclass(frozen=True)
class SiteConfig(ValueObject):
    """Site-wide settings the catalogue depends on.

    Passed explicitly into every operation that needs it.

    Attributes:
        default_product_image: Image shown for products without images.
        can_view_type: Who may view catalogue pages.
        viewer_groups: Groups allowed when access is restricted to named users.
    """

    default_product_image: ImageRef | None = None
    can_view_type: ViewAccess = ViewAccess.ANYONE
    viewer_groups: frozenset[str] = field(default_factory=frozenset)

    def can_view_pages(self, member: Member | None = None) -> bool:
        """Check whether a member may view catalogue pages.

        Args:
            member: Caller identity, None for anonymous visitors.

        Returns:
            True if viewing is allowed.
        """
        if self.can_view_type == ViewAccess.ANYONE:
            return True
        if member is None:
            return False
        if self.can_view_type == ViewAccess.LOGGED_IN_USERS:
            return True
        return bool(member.groups & self.viewer_groups)
