"""
Selector rule sets for boat listing and dealer pages.

Each rule set is an ordered mapping of output field name to rule. A rule's
``type`` picks how the value is read:

- ``text``: concatenated, trimmed text of every node matching ``selector``.
  ``remove`` names an earlier field whose value is cut out of the text.
  ``optional`` rules yield None instead of "" when nothing matches.
- ``attribute``: attribute ``attribute`` of the single node matching
  ``selector`` (``exactly_one`` is on by default).
- ``link``: like ``attribute``, resolved against the site's base URL;
  yields "" when absent.
- ``key_values``: for each node matching ``selector``, the first child is the
  key (``strip_suffix`` removed) and the second child the value. An optional
  ``guard`` (``selector`` + ``equals``) must match first.
- ``groups``: one category per node matching ``selector``, titled by the
  ``title`` selector, with ``items`` read as ``key_values``.
- ``coordinates``: ``attribute`` of the single ``selector`` match, formatted as
  ``(a,b)`` and split into the two names in ``fields``.
- ``section``: when exactly one node matches ``selector``, its nested
  ``fields`` rules are applied inside it.
"""

from typing import Dict, Any


RULE_TYPES = ('text', 'attribute', 'link', 'key_values', 'groups', 'coordinates', 'section')

KEY_CHARACTERISTICS_TITLE = "Caractéristiques clés"


BOAT_RULES: Dict[str, Dict[str, Any]] = {
    'year_of_construction': {
        'type': 'text',
        'selector': 'span[data-cash-sentinel="boat-year"]'
    },
    'description': {
        'type': 'text',
        'selector': 'div[id="textDescription"]'
    },
    'key_specs': {
        'type': 'key_values',
        'guard': {
            'selector': 'div[id="description"] span[class="titleKey"]',
            'equals': KEY_CHARACTERISTICS_TITLE
        },
        'selector': 'div[id="description"] ul[class="lstDetails"] li',
        'strip_suffix': ':'
    },
    'categories': {
        'type': 'groups',
        'selector': 'div[id="detailed_inventory"] div[class="blockCateg"]',
        'title': 'div[class="titleCateg"]',
        'items': 'ul[class="lstDetails"] li',
        'strip_suffix': ':'
    },
    'vendor_url': {
        'type': 'link',
        'selector': 'div[class="sold"] a[class="fap-link"]',
        'attribute': 'href'
    }
}


VENDOR_RULES: Dict[str, Dict[str, Any]] = {
    'card': {
        'type': 'section',
        'selector': 'div[class="oneCardPro"]',
        'fields': {
            'name': {'type': 'text', 'selector': 'h2'},
            'address': {'type': 'text', 'selector': 'p[class="address"]'},
            'zipcode': {'type': 'text', 'selector': 'p[class="city"] span'},
            'city': {'type': 'text', 'selector': 'p[class="city"]', 'remove': 'zipcode'},
            'country': {'type': 'text', 'selector': 'p[class="country"]'}
        }
    },
    'coordinates': {
        'type': 'coordinates',
        'selector': 'div[id="map"]',
        'attribute': 'data-coordinates',
        'fields': ['longitude', 'latitude']
    },
    'phone': {
        'type': 'attribute',
        'selector': 'a[id="btnCallOffice"]',
        'attribute': 'rel'
    },
    'mail': {
        'type': 'attribute',
        'selector': 'a[id="btnEmailOffice"]',
        'attribute': 'rel'
    },
    'description': {
        'type': 'text',
        'selector': 'div[class="container"] div[class="description"]',
        'optional': True
    }
}


def merge_rules(defaults: Dict[str, Dict[str, Any]],
                overrides: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Replace default rules field by field; new fields are appended in order"""
    merged = dict(defaults)
    for name, rule in (overrides or {}).items():
        merged[name] = rule
    return merged
