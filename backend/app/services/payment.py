from typing import List, Mapping, Optional

from ..cache import cache_key, cache_key_params
from ..errors import NoUpdatedData
from ..models import Payment
from ..repositories.payments import PaymentRepository
from .base import CachedService, service_errors


class PaymentService(CachedService):
    def __init__(self, repo: PaymentRepository, cache, cache_write_strict=None):
        super().__init__(cache, cache_write_strict)
        self.repo = repo

    def create_payment(self, name: str, type: str, logo: Optional[str] = None) -> Payment:
        with service_errors("payment.create"):
            payment = self.repo.create_payment(name, type, logo)
            self._cache_set(cache_key("payment", payment.id), payment)
            self._cache_invalidate("payments:")
            return payment

    def get_payment(self, payment_id: int) -> Payment:
        key = cache_key("payment", payment_id)
        cached = self._cache_get(key, Payment)
        if cached is not None:
            return cached
        with service_errors("payment.get"):
            payment = self.repo.get_payment_by_id(payment_id)
            self._cache_set(key, payment)
            return payment

    def list_payments(self, skip: int, limit: int) -> List[Payment]:
        key = cache_key("payments", cache_key_params(skip, limit))
        cached = self._cache_get(key, List[Payment])
        if cached is not None:
            return cached
        with service_errors("payment.list"):
            payments = self.repo.list_payments(skip, limit)
            self._cache_set(key, payments, List[Payment])
            return payments

    def update_payment(self, payment_id: int, patch: Mapping) -> Payment:
        with service_errors("payment.update"):
            existing = self.repo.get_payment_by_id(payment_id)
            if not patch or all(getattr(existing, k) == v for k, v in patch.items()):
                raise NoUpdatedData()
            payment = self.repo.update_payment(payment_id, patch)
            key = cache_key("payment", payment_id)
            self._cache_evict(key)
            self._cache_set(key, payment)
            self._cache_invalidate("payments:")
            return payment

    def delete_payment(self, payment_id: int) -> None:
        with service_errors("payment.delete"):
            self.repo.get_payment_by_id(payment_id)
            self.repo.delete_payment(payment_id)
            self._cache_evict(cache_key("payment", payment_id))
            self._cache_invalidate("payments:")
