"""Domain layer - Entities, value objects, permissions and exceptions.

This module exports the core catalogue building blocks:

- **Entities**: Objects with identity (Product, Category, Tag)
- **Value Objects**: Immutable objects compared by value (Money, ImageRef, SiteConfig)
- **Permissions**: Permission codes and the policy that checks them
- **Exceptions**: Domain-specific errors

Example usage:
    from catalogue_admin.domain import Category, Product

    shoes = Category(id=1, title="Shoes")
    product = Product(id=42, title="Blue Suede Shoes", categories=[shoes])
    product.parent  # shoes
"""

# Base classes
from catalogue_admin.domain.base import Entity, ValueObject

# Entities
from catalogue_admin.domain.entities import (
    Category,
    Product,
    ProductImage,
    RelatedProduct,
    Tag,
)

# Exceptions
from catalogue_admin.domain.exceptions import (
    CatalogueError,
    CategoryNotFoundError,
    DomainError,
    InvalidCategoryHierarchyError,
    MoneyError,
    NegativeMoneyError,
    PermissionDeniedError,
    ProductNotFoundError,
    ProductNotPersistedError,
    RequiredFieldError,
)

# Permissions
from catalogue_admin.domain.permissions import (
    Action,
    CataloguePermissions,
    EntityKind,
    InMemoryPermissionChecker,
    PermissionChecker,
    provide_permissions,
)

# Value Objects
from catalogue_admin.domain.value_objects import (
    BreadcrumbEntry,
    ImageRef,
    Member,
    Money,
    SiteConfig,
    ViewAccess,
)

__all__ = [
    # Base
    "Entity",
    "ValueObject",
    # Entities
    "Category",
    "Product",
    "ProductImage",
    "RelatedProduct",
    "Tag",
    # Exceptions
    "CatalogueError",
    "CategoryNotFoundError",
    "DomainError",
    "InvalidCategoryHierarchyError",
    "MoneyError",
    "NegativeMoneyError",
    "PermissionDeniedError",
    "ProductNotFoundError",
    "ProductNotPersistedError",
    "RequiredFieldError",
    # Permissions
    "Action",
    "CataloguePermissions",
    "EntityKind",
    "InMemoryPermissionChecker",
    "PermissionChecker",
    "provide_permissions",
    # Value Objects
    "BreadcrumbEntry",
    "ImageRef",
    "Member",
    "Money",
    "SiteConfig",
    "ViewAccess",
]
