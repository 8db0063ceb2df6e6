"""
Field Extractor Implementation

Applies the declarative rule sets from ``rules.py`` to parsed markup and
builds BoatRecord and VendorRecord objects. Missing markup never raises: the
corresponding field is left empty (boats) or unset (vendors).
"""

import logging
from datetime import datetime
from typing import Dict, Any, List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, NavigableString, Tag

from boat_scraper.core.base import (
    FieldExtractorInterface,
    BoatRecord,
    VendorRecord,
    KeyValue,
    Category,
    ConfigurationError,
    ExtractionError
)
from boat_scraper.core.config import DEFAULT_BASE_URL
from boat_scraper.extractors.rules import BOAT_RULES, VENDOR_RULES, RULE_TYPES, merge_rules


Scope = Union[BeautifulSoup, Tag]


class FieldExtractor(FieldExtractorInterface):
    """
    Generic "extract fields per rule set" engine for listing and dealer pages.
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.logger = logging.getLogger(__name__)
        self.base_url = config.get('base_url', DEFAULT_BASE_URL)

        extraction = config.get('extraction', {})
        self.boat_rules = merge_rules(BOAT_RULES, extraction.get('boat', {}))
        self.vendor_rules = merge_rules(VENDOR_RULES, extraction.get('vendor', {}))

        self.validate_rules(self.boat_rules)
        self.validate_rules(self.vendor_rules)

    async def initialize(self) -> None:
        """Initialize the component"""
        self._initialized = True

    async def cleanup(self) -> None:
        """Clean up resources"""
        pass

    def validate_rules(self, rules: Dict[str, Dict[str, Any]]) -> None:
        """
        Check a rule set before any page is parsed

        Raises:
            ConfigurationError: If a rule is malformed
        """
        for name, rule in rules.items():
            if not isinstance(rule, dict):
                raise ConfigurationError(f"Rule '{name}' must be a mapping")

            rule_type = rule.get('type')
            if rule_type not in RULE_TYPES:
                raise ConfigurationError(f"Rule '{name}' has unknown type: {rule_type}")

            if not rule.get('selector'):
                raise ConfigurationError(f"Rule '{name}' has no selector")

            if rule_type in ('attribute', 'link', 'coordinates') and not rule.get('attribute'):
                raise ConfigurationError(f"Rule '{name}' needs an attribute")

            if rule_type == 'groups' and not (rule.get('title') and rule.get('items')):
                raise ConfigurationError(f"Rule '{name}' needs title and items selectors")

            if rule_type == 'coordinates' and len(rule.get('fields', [])) != 2:
                raise ConfigurationError(f"Rule '{name}' needs exactly two field names")

            if rule_type == 'section':
                self.validate_rules(rule.get('fields', {}))

    def extract_boat(self, html: str, row_index: int, source_url: str,
                     timestamp: datetime) -> BoatRecord:
        """
        Extract a boat record from a listing page

        Args:
            html: Listing page markup
            row_index: Position of the row in the input worklist
            source_url: URL the page was fetched from
            timestamp: Capture time

        Returns:
            BoatRecord
        """
        soup = BeautifulSoup(html, 'html.parser')
        fields = self.extract_fields(soup, self.boat_rules)

        return BoatRecord(
            row_index=row_index,
            source_url=source_url,
            year_of_construction=fields.get('year_of_construction') or "",
            description=fields.get('description') or "",
            timestamp=timestamp,
            key_specs=fields.get('key_specs') or [],
            categories=fields.get('categories') or [],
            vendor_url=fields.get('vendor_url') or ""
        )

    def extract_vendor(self, html: str, source_url: str) -> VendorRecord:
        """
        Extract a vendor record from a dealer page

        Args:
            html: Dealer page markup
            source_url: URL the page was fetched from

        Returns:
            VendorRecord with absent fields left as None
        """
        soup = BeautifulSoup(html, 'html.parser')
        fields = self.extract_fields(soup, self.vendor_rules)
        known = {name: fields.get(name) for name in VendorRecord.__dataclass_fields__ if name != 'source_url'}

        return VendorRecord(source_url=source_url, **known)

    def extract_fields(self, scope: Scope, rules: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Apply every rule of a rule set in order

        Raises:
            ExtractionError: If a rule cannot be applied, e.g. a malformed selector
        """
        fields: Dict[str, Any] = {}

        for name, rule in rules.items():
            try:
                self._apply_rule(scope, name, rule, fields)
            except ExtractionError:
                raise
            except Exception as e:
                raise ExtractionError(f"Rule '{name}' failed: {e}") from e

        return fields

    def _apply_rule(self, scope: Scope, name: str, rule: Dict[str, Any], fields: Dict[str, Any]) -> None:
        rule_type = rule['type']

        if rule_type == 'section':
            nodes = scope.select(rule['selector'])
            if len(nodes) == 1:
                fields.update(self.extract_fields(nodes[0], rule.get('fields', {})))
            else:
                self.logger.debug(f"Section '{name}' matched {len(nodes)} nodes, skipping")
        elif rule_type == 'coordinates':
            fields.update(self._extract_coordinates(scope, rule))
        elif rule_type == 'text':
            fields[name] = self._extract_text(scope, rule, fields)
        elif rule_type == 'attribute':
            fields[name] = self._extract_attribute(scope, rule)
        elif rule_type == 'link':
            fields[name] = self._extract_link(scope, rule)
        elif rule_type == 'key_values':
            fields[name] = self._extract_key_values(scope, rule)
        elif rule_type == 'groups':
            fields[name] = self._extract_groups(scope, rule)

    def _extract_text(self, scope: Scope, rule: Dict[str, Any], fields: Dict[str, Any]) -> Optional[str]:
        nodes = scope.select(rule['selector'])
        if not nodes and rule.get('optional'):
            return None

        text = "".join(node.get_text() for node in nodes).strip()

        removed = fields.get(rule.get('remove')) if rule.get('remove') else None
        if removed:
            text = text.replace(removed, '', 1).strip()

        return text

    def _single_attribute(self, scope: Scope, rule: Dict[str, Any]) -> Optional[str]:
        nodes = scope.select(rule['selector'])
        if rule.get('exactly_one', True) and len(nodes) != 1:
            return None
        if not nodes:
            return None

        value = nodes[0].get(rule['attribute'])
        # Multi-valued attributes such as rel come back as lists
        if isinstance(value, list):
            value = " ".join(value)
        return value

    def _extract_attribute(self, scope: Scope, rule: Dict[str, Any]) -> Optional[str]:
        return self._single_attribute(scope, rule)

    def _extract_link(self, scope: Scope, rule: Dict[str, Any]) -> str:
        href = self._single_attribute(scope, rule)
        if not href:
            return ""
        return urljoin(self.base_url, href)

    def _extract_coordinates(self, scope: Scope, rule: Dict[str, Any]) -> Dict[str, Optional[str]]:
        first, second = rule['fields']
        raw = self._single_attribute(scope, rule)
        if raw is None:
            return {}

        parts = [part.strip() for part in raw.replace('(', '').replace(')', '').split(',')]
        return {
            first: parts[0] if parts and parts[0] else None,
            second: parts[1] if len(parts) > 1 and parts[1] else None
        }

    def _extract_key_values(self, scope: Scope, rule: Dict[str, Any]) -> List[KeyValue]:
        guard = rule.get('guard')
        if guard:
            title = "".join(node.get_text() for node in scope.select(guard['selector'])).strip()
            if title != guard.get('equals', title) or not title:
                return []

        return [
            self._key_value(item, rule.get('strip_suffix', ':'))
            for item in scope.select(rule['selector'])
        ]

    def _extract_groups(self, scope: Scope, rule: Dict[str, Any]) -> List[Category]:
        categories = []
        for block in scope.select(rule['selector']):
            title = "".join(node.get_text() for node in block.select(rule['title'])).strip()
            details = [
                self._key_value(item, rule.get('strip_suffix', ':'))
                for item in block.select(rule['items'])
            ]
            categories.append(Category(title_category=title, details=details))
        return categories

    def _key_value(self, item: Tag, strip_suffix: str) -> KeyValue:
        """First child node is the key, second child node is the value"""
        children = list(item.children)

        key = self._node_text(children[0]) if children else ""
        if strip_suffix and key.endswith(strip_suffix):
            key = key[:-len(strip_suffix)].rstrip()

        value = self._node_text(children[1]) if len(children) > 1 else ""
        return KeyValue(key=key, value=value)

    @staticmethod
    def _node_text(node) -> str:
        if isinstance(node, NavigableString):
            return str(node).strip()
        return node.get_text().strip()
