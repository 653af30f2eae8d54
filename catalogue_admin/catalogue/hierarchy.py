"""Category hierarchy traversal.

Walks parent references from products and categories to build
ancestor chains, breadcrumb trails, level lookups and links.

Every walk keeps a set of visited categories and stops as soon as one
repeats, so a category that has been made its own ancestor yields the
partial chain gathered so far instead of looping.

Example usage:
    resolver = HierarchyResolver(base_url="/shop/")
    resolver.resolve_ancestors(product, include_self=True)
    resolver.build_breadcrumbs(product, max_depth=5)
"""

from collections.abc import Iterable, Iterator, Sequence

from catalogue_admin.domain.entities import Category, Product
from catalogue_admin.domain.value_objects import BreadcrumbEntry

CatalogueEntity = Product | Category

HIERARCHY_SEPARATOR = " > "
DEFAULT_MAX_DEPTH = 20


def join_links(*parts: object) -> str:
    """Join URL parts with single slashes.

    Empty and None parts are skipped, so an optional action can be
    passed straight through.

    Args:
        parts: URL fragments.

    Returns:
        Joined link.
    """
    result = ""
    for part in parts:
        if part is None or part == "":
            continue
        text = str(part)
        if not result:
            result = text
        else:
            result = result.rstrip("/") + "/" + text.lstrip("/")
    return result


def _walk_parents(start: CatalogueEntity) -> Iterator[Category]:
    """Yield parents of ``start``, nearest first, stopping on a repeat."""
    visited: set[CatalogueEntity] = {start}
    current = start.parent
    while current is not None and current not in visited:
        visited.add(current)
        yield current
        current = current.parent


class HierarchyObserver:
    """Extension point for code that adjusts traversal results.

    Subclasses override only what they need; the defaults change nothing.
    The resolver calls observers in registration order.
    """

    def update_ancestors(
        self,
        entity: CatalogueEntity,
        ancestors: list[Category],
        include_self: bool,
    ) -> None:
        """Adjust a freshly resolved ancestor list in place."""

    def update_relative_link(
        self,
        entity: CatalogueEntity,
        link: str,
        action: str | None,
    ) -> str:
        """Return a replacement relative link."""
        return link


class HierarchyResolver:
    """Resolves ancestor chains, breadcrumbs, levels and links.

    Attributes:
        base_url: Prefix for site-relative links.
        absolute_base_url: Scheme and host used for absolute links.
        observers: Hooks invoked after ancestor resolution and link building.
    """

    def __init__(
        self,
        base_url: str = "/",
        absolute_base_url: str = "",
        observers: Iterable[HierarchyObserver] = (),
    ) -> None:
        self.base_url = base_url
        self.absolute_base_url = absolute_base_url
        self.observers: tuple[HierarchyObserver, ...] = tuple(observers)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def resolve_ancestors(
        self,
        entity: CatalogueEntity,
        include_self: bool = False,
    ) -> list[Category]:
        """Get the ancestor chain of a product or category.

        A product starts from its first category, a category starts from
        itself. ``include_self`` decides whether that starting category
        heads the chain.

        Args:
            entity: Product or category.
            include_self: Include the starting category.

        Returns:
            Categories nearest first. Empty when a product has no category.
        """
        start = entity.parent if isinstance(entity, Product) else entity
        ancestors: list[Category] = []

        if start is not None:
            if include_self:
                ancestors.append(start)
            ancestors.extend(_walk_parents(start))

        for observer in self.observers:
            observer.update_ancestors(entity, ancestors, include_self)

        return ancestors

    def level_stack(self, entity: CatalogueEntity) -> list[CatalogueEntity]:
        """Get the entity and all of its parents, root first.

        Args:
            entity: Product or category.

        Returns:
            Stack with the root at index 0 and the entity last.
        """
        stack: list[CatalogueEntity] = [entity]
        for parent in _walk_parents(entity):
            stack.insert(0, parent)
        return stack

    def level(self, entity: CatalogueEntity, level: int) -> CatalogueEntity | None:
        """Get the entity at a 1-based level of the entity's own stack.

        ``level(entity, 1)`` is the root, or the entity itself when it has
        no parent.

        Args:
            entity: Product or category.
            level: 1-based level, root is 1.

        Returns:
            Entity at that level, None when out of range.
        """
        if level < 1:
            return None
        stack = self.level_stack(entity)
        if level > len(stack):
            return None
        return stack[level - 1]

    def full_hierarchy(self, category: Category) -> str:
        """Get the titles from root to category joined with ``" > "``."""
        return HIERARCHY_SEPARATOR.join(c.title for c in self.level_stack(category))

    # ------------------------------------------------------------------
    # Breadcrumbs
    # ------------------------------------------------------------------

    def breadcrumb_items(
        self,
        entity: CatalogueEntity,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> list[CatalogueEntity]:
        """Get the entities of a breadcrumb trail, root first.

        The trail is the entity followed by its ancestors, reversed. When
        it is longer than ``max_depth`` the root and the entries nearest
        the leaf are kept and the intermediate entries closest to the
        root are dropped.

        Args:
            entity: Product or category.
            max_depth: Maximum number of trail entries.

        Returns:
            Root-to-leaf entities, empty for a product without categories.
        """
        ancestors = self.resolve_ancestors(entity, include_self=True)
        if not ancestors:
            return []

        items: list[CatalogueEntity] = list(ancestors)
        if items[0] is not entity:
            items.insert(0, entity)
        items.reverse()

        return _cap_trail(items, max_depth)

    def build_breadcrumbs(
        self,
        entity: CatalogueEntity,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> list[BreadcrumbEntry]:
        """Build a breadcrumb trail for a product or category.

        Args:
            entity: Product or category.
            max_depth: Maximum number of trail entries.

        Returns:
            Root-to-leaf entries with title and link.
        """
        return [
            BreadcrumbEntry(title=item.menu_title, link=self.link(item))
            for item in self.breadcrumb_items(entity, max_depth)
        ]

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def relative_link(self, entity: CatalogueEntity, action: str | None = None) -> str:
        """Get the site-relative link of a product or category.

        Products are addressed by ID, categories by the URL segments of
        their level stack.

        Args:
            entity: Product or category.
            action: Optional action appended to the link.

        Returns:
            Relative link.
        """
        if isinstance(entity, Product):
            link = join_links(entity.id, action)
        else:
            segments = [c.url_segment or str(c.id) for c in self.level_stack(entity)]
            link = join_links(*segments, action)

        for observer in self.observers:
            link = observer.update_relative_link(entity, link, action)

        return link

    def link(self, entity: CatalogueEntity, action: str | None = None) -> str:
        """Get the link including the base URL."""
        return join_links(self.base_url, self.relative_link(entity, action))

    def absolute_link(self, entity: CatalogueEntity, action: str | None = None) -> str:
        """Get the link including scheme and host."""
        return join_links(self.absolute_base_url, self.link(entity, action))


def _cap_trail(items: Sequence[CatalogueEntity], max_depth: int) -> list[CatalogueEntity]:
    if len(items) <= max_depth:
        return list(items)
    if max_depth <= 0:
        return []
    if max_depth == 1:
        return [items[-1]]
    return [items[0], *items[len(items) - (max_depth - 1):]]
