"""Product catalog lookups with a short-lived cache."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from diet_planner.domain.nutrition import Product

_logger = logging.getLogger(__name__)


class ProductRepository(Protocol):
    """Read-only source of catalog products."""

    def get_products(self, product_ids: list[str]) -> list[Product]:
        """Return the products that exist among ``product_ids``."""


@dataclass
class _CachedProduct:
    product: Product
    expires_at: float


@dataclass
class ProductService:
    """Resolves product ids to products, caching hits for ``ttl_seconds``."""

    repository: ProductRepository
    ttl_seconds: int = 3600
    clock: Callable[[], float] = time.monotonic
    _cache: dict[str, _CachedProduct] = field(default_factory=dict, repr=False)

    def get(self, product_id: str) -> Product | None:
        """Return a single product, if it exists."""
        return self.get_many([product_id]).get(product_id)

    def get_many(self, product_ids: Iterable[str]) -> dict[str, Product]:
        """Return a mapping of the known products among ``product_ids``."""
        now = self.clock()
        found: dict[str, Product] = {}
        missing: list[str] = []
        for product_id in dict.fromkeys(product_ids):
            cached = self._cache.get(product_id)
            if cached is not None and cached.expires_at > now:
                found[product_id] = cached.product
            else:
                self._cache.pop(product_id, None)
                missing.append(product_id)

        if missing:
            for product in self.repository.get_products(missing):
                self._cache[product.id] = _CachedProduct(
                    product=product, expires_at=now + self.ttl_seconds
                )
                found[product.id] = product
            unknown = [product_id for product_id in missing if product_id not in found]
            if unknown:
                _logger.info("Unknown product ids: %s", ", ".join(unknown))
        return found

    def invalidate(self, product_id: str) -> None:
        """Forget a cached product."""
        self._cache.pop(product_id, None)
