"""Tests for shopfeeds/feeds/xml_builder.py"""

from shopfeeds.feeds.xml_builder import XmlBuilder


class TestXmlBuilder:
    def test_nested_blocks_are_indented(self):
        xml = XmlBuilder()
        xml.declaration()
        with xml.block("SHOP"):
            with xml.block("SHOPITEM"):
                xml.element("ITEM_ID", "123")

        assert xml.to_string() == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<SHOP>\n"
            "  <SHOPITEM>\n"
            "    <ITEM_ID>123</ITEM_ID>\n"
            "  </SHOPITEM>\n"
            "</SHOP>\n"
        )

    def test_element_escapes_text(self):
        xml = XmlBuilder()
        xml.element("title", "Rings & <Things>")
        assert xml.lines == ["<title>Rings &amp; &lt;Things&gt;</title>"]

    def test_cdata_element(self):
        xml = XmlBuilder()
        xml.cdata_element("g:title", "Δαχτυλίδι & σκουλαρίκια")
        assert xml.lines == ["<g:title><![CDATA[Δαχτυλίδι & σκουλαρίκια]]></g:title>"]

    def test_attributes_and_empty_element(self):
        xml = XmlBuilder()
        xml.open("feed", {"xmlns": "http://www.w3.org/2005/Atom"})
        xml.empty("link", {"href": "https://emmanuela.gr/?a=1&b=2"})
        xml.close("feed")
        assert xml.lines == [
            '<feed xmlns="http://www.w3.org/2005/Atom">',
            '  <link href="https://emmanuela.gr/?a=1&amp;b=2"/>',
            "</feed>",
        ]

    def test_declaration_encoding(self):
        xml = XmlBuilder()
        xml.declaration(encoding="utf-8")
        assert xml.lines == ['<?xml version="1.0" encoding="utf-8"?>']

    def test_numbers_and_none(self):
        xml = XmlBuilder()
        xml.element("DELIVERY_DATE", 0)
        xml.element("empty", None)
        assert xml.lines == ["<DELIVERY_DATE>0</DELIVERY_DATE>", "<empty></empty>"]
