#!/usr/bin/env python
from typing import Dict
from typing import Optional

nsmap: Dict[str, str] = {
    "atom": "http://www.w3.org/2005/Atom",
    "gd": "http://schemas.google.com/g/2005",
    "gCal": "http://schemas.google.com/gCal/2005",
    "gAcl": "http://schemas.google.com/acl/2007",
    "app": "http://www.w3.org/2007/app",
    "openSearch": "http://a9.com/-/spec/opensearch/1.1/",
}

## Values of the rel/term/scheme attributes are URIs in the gd namespace
GD_KIND = nsmap["gd"] + "#kind"
GD_EVENT_KIND = nsmap["gd"] + "#event"
GD_ATTENDEE = nsmap["gd"] + "#event.attendee"
ACL_RULE_KIND = nsmap["gAcl"] + "#accessRule"
GCAL_READ = nsmap["gCal"] + "#read"


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name


def entry_nsmap(*prefixes: str) -> Dict[Optional[str], str]:
    """
    The namespace declarations of an outgoing Atom entry: Atom as the
    default namespace, plus the given vendor prefixes.
    """
    ret: Dict[Optional[str], str] = {None: nsmap["atom"]}
    for prefix in prefixes:
        ret[prefix] = nsmap[prefix]
    return ret
