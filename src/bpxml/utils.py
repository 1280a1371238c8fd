"""Utility functions for XML tree parsing."""

import re
from typing import Dict, Optional, Tuple

_XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>')
_BOM = '\ufeff'


class XmlUtils:
    """XML processing utilities."""

    @staticmethod
    def strip_declaration(content: str) -> str:
        """Remove a leading byte-order mark and XML declaration.

        A declaration inside an already-decoded string may name an encoding
        (``utf-16``) that no longer matches the bytes handed to expat.

        Args:
            content: Raw XML string

        Returns:
            Content without the ``<?xml ...?>`` declaration
        """
        return _XML_DECLARATION.sub('', content.lstrip(_BOM), count=1)

    @staticmethod
    def split_clark(name: str) -> Tuple[Optional[str], str]:
        """Split an ElementTree ``{uri}local`` name into (uri, local)."""
        if name.startswith('{'):
            uri, local = name[1:].split('}', 1)
            return uri, local
        return None, name

    @staticmethod
    def bind(bindings: Dict[str, str], declared: Dict[str, str]) -> Dict[str, str]:
        """New scope: inherited bindings overlaid with this element's declarations.

        Redeclared prefixes move to the end so the latest declaration is
        found first by :meth:`qualify`.
        """
        scope = {prefix: uri for prefix, uri in bindings.items() if prefix not in declared}
        scope.update(declared)
        return scope

    @staticmethod
    def qualify(name: str, bindings: Dict[str, str], attribute: bool = False) -> Tuple[str, Optional[str]]:
        """Rewrite a Clark-notation name with a prefix bound to its URI.

        Args:
            name: Name as reported by ElementTree
            bindings: Prefix -> namespace URI mapping in scope ("" is the default)
            attribute: Attribute names never take the default namespace

        Returns:
            (qualified name, namespace uri); names in the default namespace
            come back as their bare local name
        """
        uri, local = XmlUtils.split_clark(name)
        if uri is None:
            return local, None
        if not attribute and bindings.get('') == uri:
            return local, uri
        for prefix, bound in reversed(list(bindings.items())):
            if prefix and bound == uri:
                return f"{prefix}:{local}", uri
        return local, uri

    @staticmethod
    def clean_text(text: Optional[str]) -> Optional[str]:
        """Trim element text, mapping blank text to None."""
        if text is None:
            return None
        stripped = text.strip()
        return stripped or None
