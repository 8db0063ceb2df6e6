"""
Vendor deduplication for the crawl pipeline.
"""

from typing import Iterator, Set


class VendorDeduplicator:
    """
    Set of vendor URLs already dispatched for processing.

    A URL is claimed before its page is fetched, so a failed fetch is not
    retried later in the same run.
    """

    def __init__(self):
        self._seen: Set[str] = set()

    def claim(self, url: str) -> bool:
        """Mark ``url`` as seen; True only the first time it is claimed"""
        if url in self._seen:
            return False
        self._seen.add(url)
        return True

    def __contains__(self, url: object) -> bool:
        return url in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        return iter(self._seen)
