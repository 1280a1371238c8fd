"""Core XML-to-tree parser.

Converts a complete XML document into a tree of :class:`XmlNode` objects.
Parsing goes through defusedxml so entity-expansion and external-reference
tricks are rejected instead of evaluated.
"""

import io
import logging
import time
from typing import Dict, List, Optional, Union
import xml.etree.ElementTree as ET

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import iterparse as defused_iterparse

from .models import XmlNode
from .utils import XmlUtils

logger = logging.getLogger(__name__)

_EVENTS = ("start-ns", "start", "end")
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class XmlParseError(Exception):
    """Raised when content is not well-formed XML.

    The parser never returns a partial tree: any failure surfaces as this one
    terminal error.
    """

    def __init__(self, message: str, position: Optional[tuple] = None):
        self.position = position  # (line, column) when expat reports it
        super().__init__(message)


class XmlTreeParser:
    """Generic attributed-tree XML parser.

    Namespace prefixes are tracked per element scope so that ``bpr:release``
    is reported as ``bpr:release`` rather than the Clark-notation name
    ElementTree uses internally.

    ElementTree only reports the namespace URI of a tag, not the prefix it
    was written with. When one URI is bound both as the default namespace
    and to a prefix, element tags come back bare.
    """

    def parse(self, content: Union[str, bytes]) -> XmlNode:
        """Parse a full XML document.

        Args:
            content: XML as bytes (encoding declaration honoured) or str

        Returns:
            Root node of the parsed tree

        Raises:
            XmlParseError: If the document is not well-formed
        """
        if isinstance(content, str):
            data = XmlUtils.strip_declaration(content).encode('utf-8')
        else:
            data = content

        start_time = time.time()
        try:
            root = self._build_tree(data)
        except ET.ParseError as e:
            raise XmlParseError(f"XML parse error: {e}", getattr(e, 'position', None)) from e
        except DefusedXmlException as e:
            raise XmlParseError(f"Forbidden XML construct: {e}") from e

        logger.debug(f"Parsed XML tree rooted at <{root.tag}> in {(time.time() - start_time) * 1000:.1f}ms")
        return root

    def _build_tree(self, data: bytes) -> XmlNode:
        root: Optional[XmlNode] = None
        stack: List[XmlNode] = []
        scopes: List[Dict[str, str]] = [{"xml": XML_NAMESPACE}]
        pending_ns: Dict[str, str] = {}

        for event, item in defused_iterparse(io.BytesIO(data), events=_EVENTS):
            if event == "start-ns":
                prefix, uri = item
                pending_ns[prefix] = uri
            elif event == "start":
                scope = XmlUtils.bind(scopes[-1], pending_ns) if pending_ns else scopes[-1]
                pending_ns = {}
                scopes.append(scope)

                tag, namespace = XmlUtils.qualify(item.tag, scope)
                attributes = {}
                for name, value in item.attrib.items():
                    attr_name, _ = XmlUtils.qualify(name, scope, attribute=True)
                    attributes[attr_name] = value

                node = XmlNode(tag=tag, attributes=attributes, namespace=namespace)
                if stack:
                    stack[-1].children.append(node)
                else:
                    root = node
                stack.append(node)
            else:
                node = stack.pop()
                node.text = XmlUtils.clean_text(item.text)
                scopes.pop()
                item.clear()

        if root is None:
            raise ET.ParseError("no element found")
        return root


def parse_xml(content: Union[str, bytes]) -> XmlNode:
    """Convenience function to parse XML content into a tree.

    Args:
        content: XML document as str or bytes

    Returns:
        Root XmlNode
    """
    return XmlTreeParser().parse(content)
