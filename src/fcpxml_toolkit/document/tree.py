"""
Index-addressed document tree.

A Document owns a flat list of Node records. Nodes refer to each other by
list index, with an explicit ``parent`` back-link, so a tree has exactly
one owner and no reference cycles. lxml is used only at the edges: to
parse incoming XML and to rebuild an element tree for serialization and
DTD validation.

Comments and processing instructions are not kept.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Union

from lxml import etree

from ..models.version import SchemaVersion


logger = logging.getLogger(__name__)


class DocumentParseError(Exception):
    """Raised when input is not well-formed XML."""
    pass


@dataclass
class Node:
    """One element in a Document arena."""
    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    tail: Optional[str] = None
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)


def _secure_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=True,
    )


class Document:
    """Arena-backed XML document."""

    def __init__(
        self,
        nodes: Optional[List[Node]] = None,
        root: Optional[int] = None,
        doctype: Optional[str] = None,
    ):
        self.nodes: List[Node] = nodes if nodes is not None else []
        self.root: Optional[int] = root
        self.doctype = doctype

    # Construction

    @classmethod
    def from_string(cls, data: Union[str, bytes]) -> "Document":
        """Parse XML text.

        Raises:
            DocumentParseError: If the text is not well-formed
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            element = etree.fromstring(data, parser=_secure_parser())
        except etree.XMLSyntaxError as e:
            raise DocumentParseError(f"Invalid XML: {e}") from e

        document = cls.from_element(element)
        docinfo = element.getroottree().docinfo
        document.doctype = docinfo.doctype or None
        logger.debug(f"Parsed document with {len(document.nodes)} element(s)")
        return document

    @classmethod
    def from_element(cls, element: etree._Element) -> "Document":
        """Copy an lxml element tree into a new arena."""
        document = cls()
        document.root = document._import_element(element, None)
        return document

    @classmethod
    def new(cls, root_tag: str, attributes: Optional[Dict[str, str]] = None) -> "Document":
        document = cls()
        document.root = document._add_node(Node(tag=root_tag, attributes=dict(attributes or {})))
        return document

    def _add_node(self, node: Node) -> int:
        self.nodes.append(node)
        return len(self.nodes) - 1

    def _import_element(self, element: etree._Element, parent: Optional[int]) -> int:
        root_index = self._add_node(self._node_from(element, parent))
        stack = [(element, root_index)]
        while stack:
            source, index = stack.pop()
            for child in source:
                if not isinstance(child.tag, str):
                    continue
                child_index = self._add_node(self._node_from(child, index))
                self.nodes[index].children.append(child_index)
                stack.append((child, child_index))
        return root_index

    @staticmethod
    def _node_from(element: etree._Element, parent: Optional[int]) -> Node:
        return Node(
            tag=element.tag,
            attributes={str(key): str(value) for key, value in element.attrib.items()},
            text=element.text,
            tail=element.tail,
            parent=parent,
        )

    # Queries

    def node(self, index: int) -> Node:
        return self.nodes[index]

    def tag(self, index: int) -> str:
        return self.nodes[index].tag

    def get(self, index: int, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.nodes[index].attributes.get(name, default)

    def attributes(self, index: int) -> Dict[str, str]:
        return self.nodes[index].attributes

    def text(self, index: int) -> Optional[str]:
        return self.nodes[index].text

    def parent(self, index: int) -> Optional[int]:
        return self.nodes[index].parent

    def children(self, index: int) -> List[int]:
        return list(self.nodes[index].children)

    def child_elements(self, index: int, tag: Optional[str] = None) -> List[int]:
        """Direct children, optionally filtered by tag."""
        return [
            child for child in self.nodes[index].children
            if tag is None or self.nodes[child].tag == tag
        ]

    def first_child(self, index: int, tag: Optional[str] = None) -> Optional[int]:
        for child in self.nodes[index].children:
            if tag is None or self.nodes[child].tag == tag:
                return child
        return None

    def ancestors(self, index: int) -> Iterator[int]:
        """Parent, grandparent, ... up to the root."""
        current = self.nodes[index].parent
        while current is not None:
            yield current
            current = self.nodes[current].parent

    def iter(self, start: Optional[int] = None) -> Iterator[int]:
        """Pre-order walk over the subtree at ``start`` (default: root)."""
        origin = self.root if start is None else start
        if origin is None:
            return
        stack = [origin]
        while stack:
            index = stack.pop()
            yield index
            stack.extend(reversed(self.nodes[index].children))

    def find_first(self, tag: str, start: Optional[int] = None) -> Optional[int]:
        for index in self.iter(start):
            if self.nodes[index].tag == tag:
                return index
        return None

    def find_all(self, tag: str, start: Optional[int] = None) -> List[int]:
        return [index for index in self.iter(start) if self.nodes[index].tag == tag]

    @property
    def element_count(self) -> int:
        """Number of elements reachable from the root."""
        return sum(1 for _ in self.iter())

    @property
    def is_empty(self) -> bool:
        return self.root is None

    @property
    def root_tag(self) -> Optional[str]:
        return None if self.root is None else self.nodes[self.root].tag

    @property
    def version(self) -> Optional[str]:
        """Raw ``version`` attribute of the root element."""
        if self.root is None:
            return None
        return self.nodes[self.root].attributes.get("version")

    @property
    def declared_version(self) -> Optional[SchemaVersion]:
        return SchemaVersion.from_string(self.version)

    # Mutation

    def set(self, index: int, name: str, value: str) -> None:
        self.nodes[index].attributes[name] = value

    def remove_attribute(self, index: int, name: str) -> bool:
        return self.nodes[index].attributes.pop(name, None) is not None

    def set_text(self, index: int, text: Optional[str]) -> None:
        self.nodes[index].text = text

    def append_child(
        self,
        parent: int,
        tag: str,
        attributes: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
    ) -> int:
        index = self._add_node(Node(tag=tag, attributes=dict(attributes or {}), text=text, parent=parent))
        self.nodes[parent].children.append(index)
        return index

    def insert_child(
        self,
        parent: int,
        position: int,
        tag: str,
        attributes: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
    ) -> int:
        index = self._add_node(Node(tag=tag, attributes=dict(attributes or {}), text=text, parent=parent))
        self.nodes[parent].children.insert(position, index)
        return index

    def remove(self, index: int) -> None:
        """Detach the subtree at ``index``.

        Detached nodes stay in the arena but are unreachable; ``copy()``
        drops them.
        """
        parent = self.nodes[index].parent
        if parent is None:
            if self.root == index:
                self.root = None
            return
        siblings = self.nodes[parent].children
        position = siblings.index(index)
        tail = self.nodes[index].tail
        # Keep surrounding whitespace tidy when the removed node carried it
        if tail is not None and position > 0:
            previous = self.nodes[siblings[position - 1]]
            previous.tail = tail
        del siblings[position]
        self.nodes[index].parent = None

    # Copy and serialization

    def copy(self) -> "Document":
        """Independent copy holding only reachable nodes."""
        duplicate = Document(doctype=self.doctype)
        if self.root is None:
            return duplicate
        remap: Dict[int, int] = {}
        for index in self.iter():
            node = self.nodes[index]
            new_parent = remap[node.parent] if node.parent is not None and index != self.root else None
            new_index = duplicate._add_node(Node(
                tag=node.tag,
                attributes=dict(node.attributes),
                text=node.text,
                tail=node.tail,
                parent=new_parent,
            ))
            remap[index] = new_index
            if new_parent is not None:
                duplicate.nodes[new_parent].children.append(new_index)
        duplicate.root = remap[self.root]
        return duplicate

    def to_element(self, start: Optional[int] = None) -> Optional[etree._Element]:
        """Rebuild an lxml element tree from the subtree at ``start``."""
        origin = self.root if start is None else start
        if origin is None:
            return None
        top = self._make_element(origin, None)
        stack = [(origin, top)]
        while stack:
            index, element = stack.pop()
            for child in self.nodes[index].children:
                child_element = self._make_element(child, element)
                stack.append((child, child_element))
        return top

    def _make_element(self, index: int, parent: Optional[etree._Element]) -> etree._Element:
        node = self.nodes[index]
        if parent is None:
            element = etree.Element(node.tag)
        else:
            element = etree.SubElement(parent, node.tag)
        for name, value in node.attributes.items():
            element.set(name, value)
        element.text = node.text
        if parent is not None:
            element.tail = node.tail
        return element

    def to_string(self, pretty: bool = True, doctype: bool = True) -> str:
        """Serialize with an XML declaration and, by default, a doctype."""
        element = self.to_element()
        if element is None:
            return ""
        if pretty:
            _strip_layout_whitespace(element)
        declared = None
        if doctype:
            declared = self.doctype or f"<!DOCTYPE {element.tag}>"
        data = etree.tostring(
            element,
            xml_declaration=True,
            encoding="UTF-8",
            pretty_print=pretty,
            doctype=declared,
        )
        return data.decode("utf-8")


def _strip_layout_whitespace(element: etree._Element) -> None:
    # pretty_print only indents elements whose text/tail is empty
    for item in element.iter():
        if item.text is not None and not item.text.strip() and len(item):
            item.text = None
        if item.tail is not None and not item.tail.strip():
            item.tail = None
