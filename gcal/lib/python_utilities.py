from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element


def to_wire(text: Union[str, bytes, None]) -> Optional[bytes]:
    if text is None:
        return None
    if isinstance(text, str):
        text = bytes(text, "utf-8")
    return text


def to_normal_str(text: Union[str, bytes, None]) -> Optional[str]:
    """
    Make sure we return a normal string, no matter if we got bytes or
    str, with unix line endings
    """
    if text is None:
        return text
    if not isinstance(text, str):
        text = text.decode("utf-8")
    text = text.replace("\r\n", "\n")
    return text


def to_element(data: Union[str, bytes, _Element]) -> _Element:
    """
    Returns the root element of some XML data.  lxml refuses unicode
    strings carrying an encoding declaration, so everything is turned
    into bytes before parsing.
    """
    if isinstance(data, etree._Element):
        return data
    return etree.XML(to_wire(data), parser=etree.XMLParser(remove_blank_text=True))
