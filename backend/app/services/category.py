from typing import List, Mapping

from ..cache import cache_key, cache_key_params
from ..errors import NoUpdatedData
from ..models import Category
from ..repositories.categories import CategoryRepository
from .base import CachedService, service_errors


class CategoryService(CachedService):
    def __init__(self, repo: CategoryRepository, cache, cache_write_strict=None):
        super().__init__(cache, cache_write_strict)
        self.repo = repo

    def create_category(self, name: str) -> Category:
        with service_errors("category.create"):
            category = self.repo.create_category(name)
            self._cache_set(cache_key("category", category.id), category)
            self._cache_invalidate("categories:")
            return category

    def get_category(self, category_id: int) -> Category:
        key = cache_key("category", category_id)
        cached = self._cache_get(key, Category)
        if cached is not None:
            return cached
        with service_errors("category.get"):
            category = self.repo.get_category_by_id(category_id)
            self._cache_set(key, category)
            return category

    def list_categories(self, skip: int, limit: int) -> List[Category]:
        key = cache_key("categories", cache_key_params(skip, limit))
        cached = self._cache_get(key, List[Category])
        if cached is not None:
            return cached
        with service_errors("category.list"):
            categories = self.repo.list_categories(skip, limit)
            self._cache_set(key, categories, List[Category])
            return categories

    def update_category(self, category_id: int, patch: Mapping) -> Category:
        with service_errors("category.update"):
            existing = self.repo.get_category_by_id(category_id)
            if not patch or all(getattr(existing, k) == v for k, v in patch.items()):
                raise NoUpdatedData()
            category = self.repo.update_category(category_id, patch)
            key = cache_key("category", category_id)
            self._cache_evict(key)
            self._cache_set(key, category)
            self._cache_invalidate("categories:")
            return category

    def delete_category(self, category_id: int) -> None:
        with service_errors("category.delete"):
            self.repo.get_category_by_id(category_id)
            self.repo.delete_category(category_id)
            self._cache_evict(cache_key("category", category_id))
            self._cache_invalidate("categories:")
