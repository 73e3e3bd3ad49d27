from typing import List, Mapping

from ..cache import cache_key, cache_key_params
from ..errors import NoUpdatedData
from ..models import User
from ..repositories.users import UserRepository
from ..security import hash_password, verify_password
from .base import CachedService, service_errors


class UserService(CachedService):
    def __init__(self, repo: UserRepository, cache, cache_write_strict=None):
        super().__init__(cache, cache_write_strict)
        self.repo = repo

    def register(self, name: str, email: str, password: str, role: str = "cashier") -> User:
        with service_errors("user.register"):
            user = self.repo.create_user(name, email, hash_password(password), role)
            self._cache_set(cache_key("user", user.id), user)
            self._cache_invalidate("users:")
            return user

    def get_user(self, user_id: int) -> User:
        key = cache_key("user", user_id)
        cached = self._cache_get(key, User)
        if cached is not None:
            return cached
        with service_errors("user.get"):
            user = self.repo.get_user_by_id(user_id)
            self._cache_set(key, user)
            return user

    def list_users(self, skip: int, limit: int) -> List[User]:
        key = cache_key("users", cache_key_params(skip, limit))
        cached = self._cache_get(key, List[User])
        if cached is not None:
            return cached
        with service_errors("user.list"):
            users = self.repo.list_users(skip, limit)
            self._cache_set(key, users, List[User])
            return users

    def update_user(self, user_id: int, patch: Mapping) -> User:
        with service_errors("user.update"):
            existing = self.repo.get_user_by_id(user_id)
            changes = {k: v for k, v in patch.items() if k != "password" and getattr(existing, k) != v}
            password = patch.get("password")
            if password and not verify_password(password, existing.password):
                changes["password"] = hash_password(password)
            if not changes:
                raise NoUpdatedData()
            user = self.repo.update_user(user_id, changes)
            key = cache_key("user", user_id)
            self._cache_evict(key)
            self._cache_set(key, user)
            self._cache_invalidate("users:")
            return user

    def delete_user(self, user_id: int) -> None:
        with service_errors("user.delete"):
            self.repo.get_user_by_id(user_id)
            self.repo.delete_user(user_id)
            self._cache_evict(cache_key("user", user_id))
            self._cache_invalidate("users:")
