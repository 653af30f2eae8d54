#!/usr/bin/env python3
"""Seed catalogue script.

Creates the category tree from a product taxonomy file (or the
embedded sample taxonomy) and optionally a handful of sample products.

Usage:
    python scripts/seed_catalogue.py
    python scripts/seed_catalogue.py --taxonomy taxonomy-with-ids.en-US.txt
    python scripts/seed_catalogue.py --with-products
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import catalogue_admin.catalogue.models  # noqa: F401  (registers tables)
from catalogue_admin.application.catalogue_service import CatalogueService, ProductData
from catalogue_admin.catalogue.repository import SqlCatalogueRepository
from catalogue_admin.domain.value_objects import Member
from catalogue_admin.infrastructure.config import settings
from catalogue_admin.infrastructure.database import Base, get_engine, get_session_factory
from catalogue_admin.infrastructure.logging_config import configure_logging

SAMPLE_PRODUCTS = [
    ("Blue Suede Shoes", "Shoes"),
    ("Canvas Sneakers", "Shoes"),
    ("Wool Beanie", "Hats"),
    ("Ultrabook Pro 14", "Laptops"),
]


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(taxonomy: Path | None, with_products: bool) -> dict:
    """Import the taxonomy and optional sample products.

    Args:
        taxonomy: Taxonomy file, the embedded sample when None.
        with_products: Whether to create sample products.

    Returns:
        Seeding result.
    """
    admin = Member(id=settings.admin_member_ids[0])
    lines = taxonomy.read_text(encoding="utf-8").splitlines() if taxonomy else None

    async with get_session_factory()() as session:
        service = CatalogueService(repository=SqlCatalogueRepository(session))
        categories = await service.import_taxonomy(lines, member=admin)
        await session.commit()

        products = []
        if with_products:
            by_title = {category.title: category for category in categories}
            for title, category_title in SAMPLE_PRODUCTS:
                category = by_title.get(category_title)
                product = await service.create_product(
                    ProductData(
                        title=title,
                        category_ids=[category.id] if category else [],
                    ),
                    member=admin,
                )
                products.append(product)
            await session.commit()

    return {
        "categories_created": len(categories),
        "products_created": len(products),
        "stock_ids": [product.stock_id for product in products],
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the product catalogue",
    )
    parser.add_argument(
        "--taxonomy",
        type=Path,
        default=None,
        help="Taxonomy file with 'ID - Path > To > Category' lines",
    )
    parser.add_argument(
        "--with-products",
        action="store_true",
        help="Also create a few sample products",
    )

    args = parser.parse_args()
    configure_logging()

    print("=" * 60)
    print("Catalogue Seeder")
    print("=" * 60)
    print(f"Taxonomy: {args.taxonomy or 'embedded'}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    result = await seed(args.taxonomy, args.with_products)
    print(f"  Categories: {result['categories_created']}")
    print(f"  Products: {result['products_created']}")
    for stock_id in result["stock_ids"]:
        print(f"    {stock_id}")

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
