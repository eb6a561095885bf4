"""
Brand Catalog

Immutable lookup tables used by brand resolution:
1. Canonical map - brand key -> direct store (order preserved)
2. Alias map - variant spelling -> canonical key
3. Disreputable list - seller names flagged as low-trust
4. Alternate retailers - brand key -> third-party retailer

The tables are data, loaded from config/*.yaml and validated once when the
catalog is built. Invalid data raises CatalogError at load time so that
resolution never has to second-guess an entry.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import urlparse

from ..common.config_loader import (
    load_alternate_retailers,
    load_brand_aliases,
    load_brand_stores,
    load_disreputable_brands,
)
from ..common.constants import QUERY_PLACEHOLDER
from ..models import StoreEntry

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog data violates one of its invariants."""


class BrandCatalog:
    """
    Read-only brand catalog.

    Usage:
        catalog = load_brand_catalog()
        entry = catalog.stores.get("nike")
        canonical = catalog.aliases.get("nike inc")
    """

    def __init__(
        self,
        stores: Mapping[str, StoreEntry],
        aliases: Optional[Mapping[str, str]] = None,
        disreputable: Iterable[str] = (),
        alternate_retailers: Optional[Mapping[str, StoreEntry]] = None,
        validate: bool = True,
    ):
        """
        Initialize the catalog.

        Args:
            stores: Canonical key -> StoreEntry, in matching priority order
            aliases: Variant spelling -> canonical key
            disreputable: Low-trust seller names
            alternate_retailers: Brand key -> StoreEntry carrying a store name
            validate: Check invariants now (disable only to model broken data)
        """
        self._stores = MappingProxyType(dict(stores))
        self._aliases = MappingProxyType(dict(aliases or {}))
        self._disreputable = frozenset(name.strip().lower() for name in disreputable)
        self._alternates = MappingProxyType(dict(alternate_retailers or {}))

        if validate:
            self.validate()

    @property
    def stores(self) -> Mapping[str, StoreEntry]:
        return self._stores

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def disreputable(self) -> frozenset:
        return self._disreputable

    @property
    def alternate_retailers(self) -> Mapping[str, StoreEntry]:
        return self._alternates

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, key: object) -> bool:
        return key in self._stores

    def validate(self) -> None:
        """
        Check all catalog invariants.

        Raises:
            CatalogError: Listing every problem found
        """
        problems: List[str] = []

        for key, entry in self._stores.items():
            problems.extend(_check_key(key, "brand"))
            problems.extend(_check_entry(key, entry))
            if entry.store:
                problems.append(f"brand {key!r}: direct store entries must not name a retailer")

        for alias, target in self._aliases.items():
            problems.extend(_check_key(alias, "alias"))
            if alias in self._stores:
                problems.append(f"alias {alias!r}: shadows a canonical brand key")
            if target not in self._stores:
                problems.append(f"alias {alias!r}: target {target!r} is not a catalog brand")

        for key, entry in self._alternates.items():
            problems.extend(_check_key(key, "alternate retailer"))
            problems.extend(_check_entry(key, entry))
            if key in self._stores:
                problems.append(f"alternate retailer {key!r}: shadows a canonical brand key")
            if not entry.store:
                problems.append(f"alternate retailer {key!r}: missing store name")

        for name in self._disreputable:
            if name in self._stores:
                problems.append(f"disreputable brand {name!r}: is also a catalog brand")

        if problems:
            raise CatalogError("Invalid brand catalog:\n  " + "\n  ".join(problems))

    @classmethod
    def from_records(
        cls,
        stores: Mapping[str, Dict[str, Any]],
        aliases: Optional[Mapping[str, str]] = None,
        disreputable: Iterable[str] = (),
        alternate_retailers: Optional[Mapping[str, Dict[str, Any]]] = None,
    ) -> "BrandCatalog":
        """
        Build a validated catalog from raw config records.

        Args:
            stores: Brand key -> {'url', 'search_template'}
            aliases: Variant spelling -> canonical key
            disreputable: Low-trust seller names
            alternate_retailers: Brand key -> {'store', 'url', 'search_template'}

        Returns:
            BrandCatalog

        Raises:
            CatalogError: If a record is malformed or an invariant fails
        """
        return cls(
            stores={key: _entry_from_record(key, record) for key, record in stores.items()},
            aliases=aliases,
            disreputable=disreputable,
            alternate_retailers={
                key: _entry_from_record(key, record)
                for key, record in (alternate_retailers or {}).items()
            },
        )


def _entry_from_record(key: str, record: Any) -> StoreEntry:
    """Convert a raw YAML record to a StoreEntry."""
    if not isinstance(record, dict) or not record.get("url"):
        raise CatalogError(f"{key!r}: record must be a mapping with a url")
    return StoreEntry(
        url=record["url"],
        search_template=record.get("search_template"),
        store=record.get("store"),
    )


def _check_key(key: str, kind: str) -> List[str]:
    """Keys are stored normalized: lower-case and trimmed."""
    if not isinstance(key, str) or not key.strip():
        return [f"{kind} {key!r}: key must be a non-empty string"]
    if key != key.strip().lower():
        return [f"{kind} {key!r}: key must be lower-case and trimmed"]
    return []


def _check_entry(key: str, entry: StoreEntry) -> List[str]:
    """URLs are absolute https; templates carry exactly one placeholder."""
    problems = []
    if not _is_secure_url(entry.url):
        problems.append(f"{key!r}: url {entry.url!r} is not an absolute https URL")
    template = entry.search_template
    if template is not None:
        count = template.count(QUERY_PLACEHOLDER)
        if count != 1:
            problems.append(
                f"{key!r}: search template must contain {QUERY_PLACEHOLDER} exactly once (found {count})"
            )
        if not _is_secure_url(template.replace(QUERY_PLACEHOLDER, "x")):
            problems.append(f"{key!r}: search template {template!r} is not an absolute https URL")
    return problems


def _is_secure_url(url: str) -> bool:
    parsed = urlparse(url or "")
    return parsed.scheme == "https" and bool(parsed.netloc)


_default_catalog: Optional[BrandCatalog] = None


def load_brand_catalog(reload: bool = False) -> BrandCatalog:
    """
    Load and validate the catalog from config files.

    The result is cached for the life of the process.

    Args:
        reload: Re-read the config files even if a catalog is cached

    Returns:
        BrandCatalog

    Raises:
        CatalogError: If the catalog data is invalid
        FileNotFoundError: If a config file is missing
    """
    global _default_catalog
    if _default_catalog is None or reload:
        _default_catalog = BrandCatalog.from_records(
            stores=load_brand_stores(),
            aliases=load_brand_aliases(),
            disreputable=load_disreputable_brands(),
            alternate_retailers=load_alternate_retailers(),
        )
        logger.debug(
            "Loaded brand catalog: %d brands, %d aliases, %d alternate retailers",
            len(_default_catalog.stores),
            len(_default_catalog.aliases),
            len(_default_catalog.alternate_retailers),
        )
    return _default_catalog
