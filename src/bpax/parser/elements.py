"""Application Modeller element extraction and tree reconstruction.

Elements are emitted as a flat, parent-referencing list (the shape stored in
analysis results) and rebuilt into a hierarchy on demand for display.
"""

import logging

from bpxml import XmlNode

from bpax.diagnostics import NoteCollector
from bpax.models.analysis import ElementAttribute, VBOElement

logger = logging.getLogger(__name__)

ELEMENT_TAGS = ("element", "group")
PATH_SEPARATOR = " - "


class ElementExtractor:
    """Walks an ``<appdef>`` subtree and flattens its elements and groups."""

    def __init__(self, notes: NoteCollector | None = None):
        self.notes = notes or NoteCollector()

    def extract(self, appdef: XmlNode | None) -> list[VBOElement]:
        """Extract all elements below the application definition.

        Args:
            appdef: The ``<appdef>`` node, or None when the object has none

        Returns:
            Flat element list in document (pre-)order
        """
        elements: list[VBOElement] = []
        if appdef is not None:
            self._walk(appdef, elements)
        logger.debug(f"Extracted {len(elements)} Application Modeller elements")
        return elements

    def _walk(self, appdef: XmlNode, elements: list[VBOElement]) -> None:
        # Explicit stack: Application Modeller trees can nest deeper than the recursion limit
        stack: list[tuple[XmlNode, str, str | None]] = [(node, "", None) for node in reversed(appdef.children)]
        while stack:
            node, parent_path, parent_id = stack.pop()
            if node.tag not in ELEMENT_TAGS:
                continue

            name = node.get("name")
            element_id = node.child_text("id") or node.get("id")
            if not name or not element_id:
                # Subtree dropped: children of an unidentifiable node are not salvaged
                self.notes.warn(
                    "elements",
                    f"Skipped <{node.tag}> without {'name' if not name else 'id'} and its subtree",
                    parent_id=parent_id,
                    name=name,
                    id=element_id,
                )
                continue

            path = f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name
            if node.tag == "group":
                element_type = "group"
            else:
                element_type = node.child_text("type") or node.tag

            elements.append(VBOElement(
                id=element_id,
                name=name,
                type=element_type,
                parent_id=parent_id,
                path=path,
                attributes=self._attributes(node),
            ))

            stack.extend((child, path, element_id) for child in reversed(node.children))

    def _attributes(self, node: XmlNode) -> dict[str, ElementAttribute] | None:
        """Attributes carrying a ``ProcessValue`` descriptor; None when there are none."""
        container = node.find("attributes")
        if container is None:
            return None

        attributes: dict[str, ElementAttribute] = {}
        for attribute in container.find_all("attribute"):
            attr_name = attribute.get("name")
            value = attribute.find("ProcessValue")
            if not attr_name or value is None:
                continue
            attributes[attr_name] = ElementAttribute(
                datatype=value.get("datatype"),
                value=value.get("value"),
                inuse=attribute.get("inuse") == "True",
            )
        return attributes or None


def build_element_tree(elements: list[VBOElement], notes: NoteCollector | None = None) -> list[VBOElement]:
    """Rebuild the element hierarchy from a flat list.

    Two passes: index every element by id first, then link by ``parent_id``,
    so parents may appear before or after their children.

    Args:
        elements: Flat element list
        notes: Optional collector for orphan/cycle notes

    Returns:
        Root elements, each carrying its ``children`` recursively
    """
    notes = notes or NoteCollector()

    by_id: dict[str, VBOElement] = {}
    for element in elements:
        if element.id in by_id:
            notes.warn("element-tree", f"Duplicate element id {element.id!r}; first occurrence kept")
            continue
        by_id[element.id] = element

    children_of: dict[str, list[str]] = {}
    root_ids: list[str] = []
    for element in by_id.values():
        if element.parent_id is None:
            root_ids.append(element.id)
        elif element.parent_id in by_id:
            children_of.setdefault(element.parent_id, []).append(element.id)
        else:
            notes.warn(
                "element-tree",
                f"Element {element.name!r} references unknown parent {element.parent_id!r}; promoted to root",
            )
            root_ids.append(element.id)

    # Pre-order visit from the roots; every element has one parent so nothing is reached twice
    order: list[str] = []
    stack = list(reversed(root_ids))
    while stack:
        element_id = stack.pop()
        order.append(element_id)
        stack.extend(reversed(children_of.get(element_id, [])))
    placed = set(order)

    # Children before parents, so each copy links already-built children
    built: dict[str, VBOElement] = {}
    for element_id in reversed(order):
        children = [built[child_id] for child_id in children_of.get(element_id, [])]
        built[element_id] = by_id[element_id].model_copy(update={"children": children})
    roots = [built[root_id] for root_id in root_ids]

    unreachable = [element_id for element_id in by_id if element_id not in placed]
    if unreachable:
        notes.warn("element-tree", f"{len(unreachable)} elements form a parent cycle and were dropped",
                   ids=unreachable)
    return roots


def flatten_element_tree(roots: list[VBOElement]) -> list[VBOElement]:
    """Depth-first flattening of a reconstructed tree; children are stripped."""
    flat: list[VBOElement] = []
    stack = list(reversed(roots))
    while stack:
        element = stack.pop()
        flat.append(element.model_copy(update={"children": None}))
        stack.extend(reversed(element.children or []))
    return flat


def count_tree_nodes(roots: list[VBOElement]) -> int:
    count = 0
    stack = list(roots)
    while stack:
        element = stack.pop()
        count += 1
        stack.extend(element.children or [])
    return count
