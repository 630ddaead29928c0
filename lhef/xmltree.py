"""Conversion between the ``<header>`` block text and :class:`XmlElement`.

Parsing is delegated to :mod:`xml.etree.ElementTree`; its elements are copied
into plain :class:`XmlElement` trees so callers never depend on the parser.
"""

from __future__ import annotations

from xml.etree import ElementTree
from xml.sax.saxutils import escape, quoteattr

from .errors import BadXmlHeader
from .models import XmlElement


def _from_etree(el: ElementTree.Element) -> XmlElement:
    return XmlElement(
        name=el.tag,
        attributes=dict(el.attrib),
        text=el.text,
        children=[_from_etree(child) for child in el],
        tail=el.tail,
    )


def parse_xml(text: str) -> XmlElement:
    """Parse one XML element (with its subtree) from ``text``."""
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        raise BadXmlHeader(str(e)) from e
    el = _from_etree(root)
    el.tail = None
    return el


def _write_attributes(attributes: dict[str, str], out: list[str]) -> None:
    for key, value in attributes.items():
        out.append(f" {key}={quoteattr(str(value))}")


def _write_content(el: XmlElement, out: list[str]) -> None:
    if el.text:
        out.append(escape(el.text))
    for child in el.children:
        _write(child, out)
        if child.tail:
            out.append(escape(child.tail))


def _write(el: XmlElement, out: list[str]) -> None:
    out.append(f"<{el.name}")
    _write_attributes(el.attributes, out)
    out.append(">")
    _write_content(el, out)
    out.append(f"</{el.name}>")


def xml_to_string(el: XmlElement) -> str:
    """Serialize ``el`` and its subtree; the element's own tail is not included."""
    out: list[str] = []
    _write(el, out)
    return "".join(out)


def header_to_string(el: XmlElement) -> str:
    """Render ``el`` as an LHEF ``<header>`` block.

    The opening and closing header tags always sit on lines of their own. An
    element not called ``header`` is wrapped in one.
    """
    if el.name != "header":
        return f"<header>\n{xml_to_string(el)}\n</header>\n"
    content: list[str] = []
    _write_content(el, content)
    inner = "".join(content)
    out = ["<header"]
    _write_attributes(el.attributes, out)
    out.append(">")
    if not inner.startswith("\n"):
        out.append("\n")
    out.append(inner)
    if not inner.endswith("\n"):
        out.append("\n")
    out.append("</header>\n")
    return "".join(out)
