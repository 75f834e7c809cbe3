from lxml import etree

from gcal.elements import atom
from gcal.elements import gacl
from gcal.elements import gcal
from gcal.elements import gd
from gcal.lib.namespace import ns
from gcal.lib.namespace import nsmap


class TestElements:
    def test_entry_declares_namespaces(self):
        xml = str(atom.Entry("gd", "gCal") + atom.Title("Soccer", type="text"))
        assert xml.startswith("<?xml version='1.0' encoding='utf-8'?>")
        root = etree.XML(xml.encode("utf-8"))
        assert root.tag == ns("atom", "entry")
        assert root.nsmap[None] == nsmap["atom"]
        assert root.nsmap["gd"] == nsmap["gd"]
        assert root.nsmap["gCal"] == nsmap["gCal"]
        assert "gAcl" not in root.nsmap
        assert root.find(ns("atom", "title")).get("type") == "text"

    def test_none_attributes_left_out(self):
        root = etree.XML(
            str(atom.Entry("gd") + gd.When(startTime=None, endTime="2009-06-12")).encode(
                "utf-8"
            )
        )
        when = root.find(ns("gd", "when"))
        assert when.get("startTime") is None
        assert when.get("endTime") == "2009-06-12"

    def test_nested_children(self):
        entry = atom.Entry("gd") + [
            gd.When(startTime="2009-06-12") + gd.Reminder(minutes=15, method="email"),
            gd.Who(email="kate@example.com"),
        ]
        root = entry.xmlelement()
        reminder = root.find(ns("gd", "when")).find(ns("gd", "reminder"))
        assert reminder.get("minutes") == "15"
        assert root.find(ns("gd", "who")).get("email") == "kate@example.com"

    def test_vendor_elements(self):
        root = (
            atom.Entry("gAcl", "gCal")
            + gacl.Scope(type="default")
            + gacl.Role(value=nsmap["gCal"] + "#read")
            + gcal.Hidden(value="false")
        ).xmlelement()
        assert root.find(ns("gAcl", "scope")).get("type") == "default"
        assert root.find(ns("gAcl", "role")).get("value").endswith("#read")
        assert root.find(ns("gCal", "hidden")).get("value") == "false"

    def test_text_value(self):
        root = (atom.Entry() + atom.Content("Bring shoes & ball")).xmlelement()
        assert root.findtext(ns("atom", "content")) == "Bring shoes & ball"
        assert repr(atom.Title("Soccer")) == "Title('Soccer')"

    def test_value_keyword_is_an_attribute(self):
        ## gd and gCal elements carry their value as an attribute, never as text
        root = (atom.Entry("gCal") + gcal.Color(value="#A32929")).xmlelement()
        color = root.find(ns("gCal", "color"))
        assert color.get("value") == "#A32929"
        assert color.text is None
