"""
Module: core.models.layout

Purpose:
    Provides the layout tree - an immutable binary tree describing how a
    rectangular canvas subdivides into cells. Leaves are cells that can
    hold an image, splits divide their area between exactly two children.

Key Functions:
    - iter_leaves(node): Iterate over leaf cells in tree order
    - leaf_ids(node): Leaf ids in tree order
    - merge_images(node, images): Copy of the tree with images injected
    - find_leaf(node, leaf_id): Look up a leaf by id
    - validate_tree(node): Check the tree invariants
    - node_to_dict() / node_from_dict(): Serialization for layout catalogs

Key Classes:
    - SplitDirection: horizontal (side by side) or vertical (stacked)
    - Leaf: A cell
    - Split: A two-way division
    - Layout: Named template (id, name, aspect ratio, root)
    - LayoutError: Malformed tree

Dependencies:
    - dataclasses (std)
    - .image.ImageState

Used By:
    - core.geometry.partition: Cell rectangles
    - composer.catalog: Built-in templates
    - gui.models.composition: Active layout
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Mapping, Optional, Tuple, Union

from .image import ImageState


class LayoutError(ValueError):
    """Layout tree violates its structural invariants."""
    pass


class SplitDirection(str, Enum):
    """Axis along which a split divides its area."""
    HORIZONTAL = "horizontal"  # children side by side
    VERTICAL = "vertical"      # children stacked top to bottom

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Leaf:
    """
    A cell of the layout.

    Attributes:
        id: Stable key, unique within a tree. Images are assigned by id,
            so layouts that reuse an id (e.g. "cell-1") share its image.
        image: Image state injected for rendering (None when empty)
    """

    id: str
    image: Optional[ImageState] = None

    @property
    def is_leaf(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Split:
    """
    Two-way division of a rectangle.

    Attributes:
        id: Node identifier
        direction: HORIZONTAL places children left/right,
                   VERTICAL places them top/bottom
        ratio: Fraction of the space (after the gap) given to the first child
        children: Exactly two child nodes (first, second)
    """

    id: str
    direction: SplitDirection
    children: Tuple[LayoutNode, LayoutNode]
    ratio: float = 0.5

    def __post_init__(self) -> None:
        """Validate split on construction."""
        if len(self.children) != 2:
            raise LayoutError(
                f"Split {self.id!r} must have exactly two children, got {len(self.children)}"
            )
        if not 0.0 < self.ratio < 1.0:
            raise LayoutError(f"Split {self.id!r} ratio must be in (0, 1): {self.ratio}")

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def first(self) -> LayoutNode:
        return self.children[0]

    @property
    def second(self) -> LayoutNode:
        return self.children[1]


LayoutNode = Union[Leaf, Split]


# ─────────────────────────────────────────────────────────────────────────────
# Traversal
# ─────────────────────────────────────────────────────────────────────────────

def iter_leaves(node: LayoutNode) -> Iterator[Leaf]:
    """
    Iterate over all leaves, first child before second.

    Yields:
        Leaf instances in tree order
    """
    if isinstance(node, Leaf):
        yield node
        return
    for child in node.children:
        yield from iter_leaves(child)


def leaf_ids(node: LayoutNode) -> Tuple[str, ...]:
    """Ids of all leaves in tree order."""
    return tuple(leaf.id for leaf in iter_leaves(node))


def find_leaf(node: LayoutNode, leaf_id: str) -> Optional[Leaf]:
    """
    Find a leaf by id in this subtree.

    Returns:
        Matching Leaf or None if not found
    """
    for leaf in iter_leaves(node):
        if leaf.id == leaf_id:
            return leaf
    return None


def merge_images(node: LayoutNode, images: Mapping[str, ImageState]) -> LayoutNode:
    """
    Return a copy of the tree with every leaf carrying its image.

    Leaves without an entry in ``images`` get ``image=None``. Split
    structure (ids, directions, ratios) is left untouched and the input
    tree is not modified.

    Args:
        node: Root of the tree
        images: Image states keyed by leaf id. Entries for ids that are
                not in the tree are ignored.

    Example:
        >>> root = Split("s", SplitDirection.HORIZONTAL, (Leaf("a"), Leaf("b")))
        >>> merged = merge_images(root, {"a": ImageState("a.png")})
        >>> merged.first.image.url
        'a.png'
    """
    if isinstance(node, Leaf):
        return replace(node, image=images.get(node.id))
    first, second = node.children
    return replace(node, children=(merge_images(first, images), merge_images(second, images)))


def validate_tree(node: LayoutNode) -> None:
    """
    Check the tree invariants.

    Raises:
        LayoutError: On duplicate leaf ids. Split arity and ratio are
                     checked when each Split is constructed.
    """
    seen: set[str] = set()
    for leaf in iter_leaves(node):
        if leaf.id in seen:
            raise LayoutError(f"Duplicate leaf id {leaf.id!r}")
        seen.add(leaf.id)


# ─────────────────────────────────────────────────────────────────────────────
# Layout template
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Layout:
    """
    Named composition template (immutable).

    Attributes:
        id: Catalog key
        name: Display name
        aspect_ratio: Canvas width / height
        root: Layout tree

    Example:
        >>> layout = Layout("single", "Single", 1.0, Leaf("cell-1"))
        >>> layout.leaf_ids
        ('cell-1',)
    """

    id: str
    name: str
    aspect_ratio: float
    root: LayoutNode

    def __post_init__(self) -> None:
        if self.aspect_ratio <= 0:
            raise LayoutError(f"aspect_ratio must be positive: {self.aspect_ratio}")
        validate_tree(self.root)

    @property
    def leaf_ids(self) -> Tuple[str, ...]:
        return leaf_ids(self.root)

    def canvas_height(self, canvas_width: float) -> float:
        """Logical canvas height for a given width."""
        return canvas_width / self.aspect_ratio

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "aspect_ratio": self.aspect_ratio,
            "root": node_to_dict(self.root),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Layout:
        """
        Deserialize a layout.

        Raises:
            LayoutError: Missing field, wrong type or invalid value
        """
        if not isinstance(data, dict):
            raise LayoutError(f"Layout must be an object, got {type(data).__name__}")
        try:
            return cls(
                id=data["id"],
                name=data.get("name", data["id"]),
                aspect_ratio=float(data["aspect_ratio"]),
                root=node_from_dict(data["root"]),
            )
        except LayoutError:
            raise
        except KeyError as e:
            raise LayoutError(f"Layout is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise LayoutError(f"Layout {data.get('id')!r} is malformed: {e}") from e


def node_to_dict(node: LayoutNode) -> dict:
    """Serialize a tree (structure only, images are not included)."""
    if isinstance(node, Leaf):
        return {"type": "leaf", "id": node.id}
    return {
        "type": "split",
        "id": node.id,
        "direction": str(node.direction),
        "ratio": node.ratio,
        "children": [node_to_dict(child) for child in node.children],
    }


def node_from_dict(data: dict) -> LayoutNode:
    """
    Deserialize a tree.

    Raises:
        LayoutError: Not an object, unknown node type, bad direction,
                     wrong arity or a field of the wrong type
    """
    if not isinstance(data, dict):
        raise LayoutError(f"Layout node must be an object, got {type(data).__name__}")
    kind = data.get("type")
    if kind == "leaf":
        return Leaf(id=data["id"])
    if kind != "split":
        raise LayoutError(f"Unknown node type: {kind!r}")
    try:
        direction = SplitDirection(data["direction"])
    except ValueError as e:
        raise LayoutError(f"Unknown split direction: {data['direction']!r}") from e
    try:
        children = tuple(node_from_dict(child) for child in data.get("children", []))
        ratio = float(data.get("ratio", 0.5))
    except LayoutError:
        raise
    except (TypeError, ValueError) as e:
        raise LayoutError(f"Split {data.get('id')!r} is malformed: {e}") from e
    return Split(
        id=data["id"],
        direction=direction,
        children=children,  # type: ignore[arg-type]
        ratio=ratio,
    )
