"""Category taxonomy parser.

Reads category trees written one path per line and turns them into
linked Category entities, ready to be written to the catalogue.

Taxonomy format example:
    1 - Clothing
    2 - Clothing > Shoes
    3 - Clothing > Shoes > Boots
    4 - Clothing > Hats
"""

import re
from pathlib import Path

import structlog

from catalogue_admin.domain.entities import Category

logger = structlog.get_logger()

PATH_SEPARATOR = ">"


def slugify(title: str) -> str:
    """Turn a title into a URL segment.

    Args:
        title: Category title.

    Returns:
        Lowercase segment with non-alphanumerics collapsed to hyphens.
    """
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


class TaxonomyParser:
    """Parser for category taxonomy files.

    Each line holds an ID and the full path of one category:
        ID - Category > Subcategory > Sub-subcategory

    Parents must appear in the file but not necessarily before their
    children. Categories whose parent path is missing become roots.

    Example usage:
        parser = TaxonomyParser()
        categories = parser.parse_file("taxonomy.txt")
        shoes = parser.get_by_path("Clothing > Shoes")
    """

    # Small default tree used to seed empty catalogues
    EMBEDDED_TAXONOMY = '''
1 - Apparel & Accessories
2 - Apparel & Accessories > Clothing
3 - Apparel & Accessories > Clothing > Shirts & Tops
4 - Apparel & Accessories > Clothing > Outerwear
5 - Apparel & Accessories > Clothing > Outerwear > Coats & Jackets
6 - Apparel & Accessories > Shoes
7 - Apparel & Accessories > Hats
10 - Electronics
11 - Electronics > Audio
12 - Electronics > Audio > Headphones
13 - Electronics > Computers
14 - Electronics > Computers > Laptops
20 - Home & Garden
21 - Home & Garden > Kitchen & Dining
22 - Home & Garden > Home Decor
'''.strip()

    def __init__(self) -> None:
        """Initialize parser with empty category storage."""
        self._categories: dict[int, Category] = {}
        self._by_path: dict[str, Category] = {}
        self._roots: list[Category] = []

    def parse_embedded(self) -> list[Category]:
        """Parse embedded taxonomy.

        Returns:
            List of all categories.
        """
        return self.parse_lines(self.EMBEDDED_TAXONOMY.splitlines())

    def parse_file(self, path: str | Path) -> list[Category]:
        """Parse taxonomy from file.

        Args:
            path: Path to taxonomy file.

        Returns:
            List of all categories.
        """
        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
        return self.parse_lines(lines)

    def parse_lines(self, lines: list[str]) -> list[Category]:
        """Parse taxonomy from lines.

        Args:
            lines: Lines from taxonomy file.

        Returns:
            List of all categories in file order.
        """
        self._categories.clear()
        self._by_path.clear()
        self._roots.clear()

        # First pass: create all categories
        for line in lines:
            line = line.strip()
            if not line or line.startswith("#") or " - " not in line:
                continue

            id_part, path_part = line.split(" - ", 1)
            try:
                cat_id = int(id_part.strip())
            except ValueError:
                logger.warning("Skipping taxonomy line with bad ID", line=line)
                continue

            parts = _split_path(path_part)
            title = parts[-1]
            category = Category(id=cat_id, title=title, url_segment=slugify(title))
            self._categories[cat_id] = category
            self._by_path[_join_path(parts)] = category

        # Second pass: link parents and children
        for path, category in self._by_path.items():
            parts = _split_path(path)
            parent = self._by_path.get(_join_path(parts[:-1])) if len(parts) > 1 else None
            if parent is None:
                self._roots.append(category)
                continue
            category.parent = parent
            parent.children.append(category)

        return list(self._categories.values())

    def get_by_id(self, category_id: int) -> Category | None:
        """Get category by ID, None if not parsed."""
        return self._categories.get(category_id)

    def get_by_path(self, path: str) -> Category | None:
        """Get category by full path, None if not parsed."""
        return self._by_path.get(_join_path(_split_path(path)))

    def get_root_categories(self) -> list[Category]:
        """Get top-level categories."""
        return self._roots

    def get_all(self) -> list[Category]:
        """Get all categories."""
        return list(self._categories.values())


def _split_path(path: str) -> list[str]:
    return [part.strip() for part in path.split(PATH_SEPARATOR)]


def _join_path(parts: list[str]) -> str:
    return f" {PATH_SEPARATOR} ".join(parts)
