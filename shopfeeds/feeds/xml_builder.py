"""
Line-oriented XML assembly.

Feeds are written as indented text, one element per line, the way the
marketplaces' sample feeds look. Text is escaped with escape_xml, or
wrapped in CDATA for free text (titles, descriptions, categories).
"""

from contextlib import contextmanager
from typing import Dict, List, Optional

from ..common.text_utils import cdata, escape_xml


def _attributes(attrs: Optional[Dict[str, str]]) -> str:
    if not attrs:
        return ""
    return "".join(f' {name}="{escape_xml(value)}"' for name, value in attrs.items())


class XmlBuilder:
    """
    Accumulates XML lines with indentation.

    Usage:
        xml = XmlBuilder()
        xml.declaration()
        with xml.block("SHOP"):
            with xml.block("SHOPITEM"):
                xml.element("ITEM_ID", "123")
                xml.cdata_element("PRODUCTNAME", "Δαχτυλίδι")
        xml.to_string()
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent
        self.depth = 0
        self.lines: List[str] = []

    def _line(self, text: str) -> None:
        self.lines.append(f"{self.indent * self.depth}{text}")

    def declaration(self, encoding: str = "UTF-8") -> None:
        self.lines.append(f'<?xml version="1.0" encoding="{encoding}"?>')

    def open(self, tag: str, attrs: Optional[Dict[str, str]] = None) -> None:
        self._line(f"<{tag}{_attributes(attrs)}>")
        self.depth += 1

    def close(self, tag: str) -> None:
        self.depth -= 1
        self._line(f"</{tag}>")

    @contextmanager
    def block(self, tag: str, attrs: Optional[Dict[str, str]] = None):
        self.open(tag, attrs)
        yield self
        self.close(tag)

    def element(self, tag: str, text) -> None:
        """<tag>escaped text</tag>"""
        self._line(f"<{tag}>{escape_xml(text)}</{tag}>")

    def cdata_element(self, tag: str, text) -> None:
        """<tag><![CDATA[text]]></tag>"""
        self._line(f"<{tag}>{cdata(text)}</{tag}>")

    def empty(self, tag: str, attrs: Optional[Dict[str, str]] = None) -> None:
        """<tag attr="..."/>"""
        self._line(f"<{tag}{_attributes(attrs)}/>")

    def to_string(self) -> str:
        return "\n".join(self.lines) + "\n"
