"""Tag literals and the attribute grammar of LHEF opening tags.

Attributes are extracted without an XML parser: an opening tag such as
``<event npLO=" 2 " nloflag='1'>`` is split into its name and a sequence of
``name="value"`` / ``name='value'`` pairs. Values cannot contain their own
quote character (there is no escaping).
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from .errors import BadXmlTag, InvalidAttribute

LHEF_TAG = "<LesHouchesEvents"
LHEF_TAG_OPEN = '<LesHouchesEvents version='
LHEF_LAST_LINE = "</LesHouchesEvents>"
COMMENT_START = "<!--"
COMMENT_END = "-->"
HEADER_START = "<header"
HEADER_END = "</header>"
INIT_START = "<init"
INIT_END = "</init>"
EVENT_START = "<event"
EVENT_END = "</event>"

SUPPORTED_VERSIONS = ("1.0", "2.0", "3.0")

_QUOTES = ("'", '"')


class Attr(NamedTuple):
    name: str
    value: str


def opens_tag(line: str, tag: str) -> bool:
    """True if ``line`` (ignoring leading whitespace) opens ``tag``.

    ``tag`` is the literal without the closing bracket, e.g. ``"<event"``. The
    character after it must end the tag name, so ``<eventgroup>`` does not
    open an event.
    """
    s = line.lstrip()
    if not s.startswith(tag):
        return False
    rest = s[len(tag):]
    return not rest or rest[0].isspace() or rest[0] in ">/"


def extract_attr_str(xml_tag: str) -> str:
    """Return the attribute part of an opening tag line.

    The tag must end in ``>``. Everything up to the first whitespace is the
    tag name and is dropped.
    """
    tag = xml_tag.strip()
    if not tag.endswith(">"):
        raise BadXmlTag(xml_tag)
    tag = tag[:-1]
    for idx, c in enumerate(tag):
        if c.isspace():
            return tag[idx + 1:].lstrip()
    return ""


def _find_name_end(s: str) -> Optional[int]:
    for idx, c in enumerate(s):
        if c.isspace() or c == "=":
            return idx
    return None


def next_attr(attr_str: str) -> tuple[Optional[Attr], str]:
    """Parse one attribute from the front of ``attr_str``.

    Returns ``(None, attr_str)`` once no name is left, otherwise the attribute
    and the unconsumed remainder.
    """
    rem = attr_str.lstrip()
    if not rem:
        return None, rem
    name_end = _find_name_end(rem)
    if name_end is None:
        # a bare word without '=' at the end of the tag
        raise BadXmlTag(attr_str)
    name = rem[:name_end]
    rem = rem[name_end:].lstrip()
    if not rem.startswith("="):
        raise BadXmlTag(attr_str)
    rem = rem[1:].lstrip()
    if not rem or rem[0] not in _QUOTES:
        raise BadXmlTag(attr_str)
    quote = rem[0]
    rem = rem[1:]
    value_end = rem.find(quote)
    if value_end < 0:
        raise BadXmlTag(attr_str)
    value = rem[:value_end]
    rem = rem[value_end + 1:].lstrip()
    return Attr(name, value), rem


def parse_attributes(xml_tag: str) -> dict[str, str]:
    """Extract all attributes from an opening tag line.

    >>> parse_attributes('<event attr0="t0" attr1=\\'\\'>')
    {'attr0': 't0', 'attr1': ''}
    """
    attr_str = extract_attr_str(xml_tag)
    attr: dict[str, str] = {}
    while True:
        parsed, attr_str = next_attr(attr_str)
        if parsed is None:
            return attr
        attr[parsed.name] = parsed.value


def _valid_name(name: str) -> bool:
    if not name:
        return False
    return not any(c.isspace() or c in "=<>/'\"" for c in name)


def format_attributes(attr: dict[str, str]) -> str:
    """Render an attribute map as it appears inside an opening tag.

    Each entry becomes `` name="value"``; values holding a double quote are
    written with single quotes instead.
    """
    out = []
    for name, value in attr.items():
        name = str(name)
        value = str(value)
        if not _valid_name(name):
            raise InvalidAttribute(name, value)
        if '"' not in value:
            out.append(f' {name}="{value}"')
        elif "'" not in value:
            out.append(f" {name}='{value}'")
        else:
            raise InvalidAttribute(name, value)
    return "".join(out)
