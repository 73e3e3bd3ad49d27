from decimal import Decimal
from typing import List, Mapping, Optional

from ..cache import cache_key, cache_key_params
from ..errors import NoUpdatedData
from ..models import Product
from ..repositories.categories import CategoryRepository
from ..repositories.products import ProductRepository
from .base import CachedService, service_errors


class ProductService(CachedService):
    """Product CRUD; every product handed out carries its category."""

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository, cache, cache_write_strict=None):
        super().__init__(cache, cache_write_strict)
        self.repo = repo
        self.category_repo = category_repo

    def create_product(
        self,
        category_id: int,
        name: str,
        price: Decimal,
        stock: int,
        image: Optional[str] = None,
    ) -> Product:
        with service_errors("product.create"):
            category = self.category_repo.get_category_by_id(category_id)
            product = self.repo.create_product(category_id, name, price, stock, image)
            product.category = category
            self._cache_set(cache_key("product", product.id), product)
            self._cache_invalidate("products:")
            return product

    def get_product(self, product_id: int) -> Product:
        key = cache_key("product", product_id)
        cached = self._cache_get(key, Product)
        if cached is not None:
            return cached
        with service_errors("product.get"):
            product = self.repo.get_product_by_id(product_id)
            product.category = self.category_repo.get_category_by_id(product.category_id)
            self._cache_set(key, product)
            return product

    def list_products(
        self,
        skip: int,
        limit: int,
        category_id: Optional[int] = None,
        search: str = "",
    ) -> List[Product]:
        key = cache_key("products", cache_key_params(skip, limit, category_id or 0, search or ""))
        cached = self._cache_get(key, List[Product])
        if cached is not None:
            return cached
        with service_errors("product.list"):
            products = self.repo.list_products(skip, limit, category_id=category_id, search=search)
            categories = {}
            for p in products:
                if p.category_id not in categories:
                    categories[p.category_id] = self.category_repo.get_category_by_id(p.category_id)
                p.category = categories[p.category_id]
            self._cache_set(key, products, List[Product])
            return products

    def update_product(self, product_id: int, patch: Mapping) -> Product:
        with service_errors("product.update"):
            existing = self.repo.get_product_by_id(product_id)
            if not patch or all(getattr(existing, k) == v for k, v in patch.items()):
                raise NoUpdatedData()
            category = self.category_repo.get_category_by_id(patch.get("category_id") or existing.category_id)
            product = self.repo.update_product(product_id, patch)
            product.category = category
            key = cache_key("product", product_id)
            self._cache_evict(key)
            self._cache_set(key, product)
            self._cache_invalidate("products:")
            return product

    def delete_product(self, product_id: int) -> None:
        with service_errors("product.delete"):
            self.repo.get_product_by_id(product_id)
            self.repo.delete_product(product_id)
            self._cache_evict(cache_key("product", product_id))
            self._cache_invalidate("products:")
