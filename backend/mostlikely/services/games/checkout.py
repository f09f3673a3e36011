import logging
import uuid
from typing import Optional

from mostlikely.models import (
    CHECKOUT_CANCELED,
    CHECKOUT_PAID,
    Checkout,
)
from .errors import AlreadyDone, NotFound, StateConflict, Unauthorized

log = logging.getLogger(__name__)


def generate_checkout_id() -> str:
    return 'cs_' + uuid.uuid4().hex[:20]


class UnlockGate:
    """Mock checkout lifecycle guarding the 18+ pack.

    A checkout goes ``open -> paid`` or ``open -> canceled`` and stays there.
    Paying sets ``unlock_until``; that timestamp alone decides access and it
    survives every kind of session reset.
    """

    def __init__(self, window_ms: int, checkout_ttl_ms: int):
        self.window_ms = window_ms
        self.checkout_ttl_ms = checkout_ttl_ms
        self.unlock_until: Optional[int] = None
        self.checkout: Optional[Checkout] = None

    def is_unlocked(self, now: int) -> bool:
        return self.unlock_until is not None and now < self.unlock_until

    def unlock_info(self, now: int) -> dict:
        return {'unlocked': self.is_unlocked(now), 'until': self.unlock_until}

    def _expire_abandoned(self, now: int) -> None:
        co = self.checkout
        if co is not None and co.is_open and now - co.created_at >= self.checkout_ttl_ms:
            co.status = CHECKOUT_CANCELED
            log.info(f"[checkout-expired] id={co.id}")

    def check_create(self, now: int) -> None:
        if self.is_unlocked(now):
            raise AlreadyDone('18+ is already unlocked', code='already_unlocked')
        self._expire_abandoned(now)
        if self.checkout is not None and self.checkout.is_open:
            raise StateConflict('A checkout is already open', code='checkout_open')

    def create(self, now: int) -> Checkout:
        self.check_create(now)
        self.checkout = Checkout(id=generate_checkout_id(), created_at=now)
        log.info(f"[checkout-open] id={self.checkout.id}")
        return self.checkout

    def _open_checkout(self, checkout_id) -> Checkout:
        if self.checkout is None:
            raise NotFound('No active checkout', code='no_checkout')
        if self.checkout.id != checkout_id:
            raise Unauthorized('Invalid checkout id', code='checkout_mismatch')
        if not self.checkout.is_open:
            raise AlreadyDone('Checkout is not open', code='checkout_resolved')
        return self.checkout

    def mark_paid(self, checkout_id, now: int) -> int:
        co = self._open_checkout(checkout_id)
        co.status = CHECKOUT_PAID
        self.unlock_until = now + self.window_ms
        log.info(f"[checkout-paid] id={co.id} unlock_until={self.unlock_until}")
        return self.unlock_until

    def mark_canceled(self, checkout_id) -> None:
        co = self._open_checkout(checkout_id)
        co.status = CHECKOUT_CANCELED
        log.info(f"[checkout-canceled] id={co.id}")

    def clear_checkout(self) -> None:
        self.checkout = None
