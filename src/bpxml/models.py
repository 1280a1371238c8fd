"""Data models for the generic XML tree.

The tree is deliberately format-agnostic: a node only knows its tag, its
attributes, its children and its trimmed text.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional


@dataclass
class XmlNode:
    """Single element of a parsed XML document.

    ``tag`` is the qualified name as written in the source document
    (``bpr:release`` stays ``bpr:release``); elements in a default namespace
    carry their bare local name and keep the URI in ``namespace``.
    """
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List['XmlNode'] = field(default_factory=list)
    text: Optional[str] = None          # Trimmed, None when empty
    namespace: Optional[str] = None     # Namespace URI, if any

    @property
    def local_name(self) -> str:
        """Tag name without its prefix."""
        return self.tag.split(':', 1)[-1]

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return an attribute value."""
        return self.attributes.get(name, default)

    def find(self, tag: str) -> Optional['XmlNode']:
        """Return the first direct child with the given tag."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_all(self, tag: str) -> List['XmlNode']:
        """Return all direct children with the given tag, in document order."""
        return [child for child in self.children if child.tag == tag]

    def find_local(self, local_name: str) -> Optional['XmlNode']:
        """Return the first direct child whose local name matches, whatever its prefix."""
        for child in self.children:
            if child.local_name == local_name:
                return child
        return None

    def child_text(self, tag: str, default: Optional[str] = None) -> Optional[str]:
        """Return the text of the first direct child with the given tag."""
        child = self.find(tag)
        if child is None or child.text is None:
            return default
        return child.text

    def iter(self, tag: Optional[str] = None) -> Iterator['XmlNode']:
        """Depth-first iteration over this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            if tag is None or node.tag == tag:
                yield node
            stack.extend(reversed(node.children))

    def __len__(self) -> int:
        return len(self.children)
