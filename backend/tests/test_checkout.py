import pytest

from mostlikely.models import CHECKOUT_CANCELED, CHECKOUT_PAID
from mostlikely.services.games.checkout import UnlockGate
from mostlikely.services.games.errors import AlreadyDone, NotFound, StateConflict, Unauthorized

DAY_MS = 24 * 60 * 60 * 1000
NOW = 1_700_000_000_000


@pytest.fixture()
def gate():
    return UnlockGate(window_ms=DAY_MS, checkout_ttl_ms=15 * 60 * 1000)


def test_paid_checkout_unlocks_for_a_day(gate):
    co = gate.create(NOW)
    assert co.id.startswith('cs_')
    until = gate.mark_paid(co.id, NOW)
    assert until == NOW + DAY_MS
    assert gate.checkout.status == CHECKOUT_PAID
    assert gate.is_unlocked(NOW)
    assert gate.is_unlocked(NOW + DAY_MS - 1)
    assert not gate.is_unlocked(NOW + DAY_MS)


def test_canceled_checkout_does_not_unlock(gate):
    co = gate.create(NOW)
    gate.mark_canceled(co.id)
    assert gate.checkout.status == CHECKOUT_CANCELED
    assert not gate.is_unlocked(NOW)
    assert gate.unlock_info(NOW) == {'unlocked': False, 'until': None}


def test_resolved_checkout_is_terminal(gate):
    co = gate.create(NOW)
    gate.mark_canceled(co.id)
    with pytest.raises(AlreadyDone):
        gate.mark_paid(co.id, NOW)
    assert not gate.is_unlocked(NOW)


def test_mismatched_or_missing_checkout(gate):
    with pytest.raises(NotFound):
        gate.mark_paid('cs_nope', NOW)
    gate.create(NOW)
    with pytest.raises(Unauthorized):
        gate.mark_paid('cs_nope', NOW)
    with pytest.raises(Unauthorized):
        gate.mark_canceled('cs_nope')


def test_only_one_open_checkout(gate):
    first = gate.create(NOW)
    with pytest.raises(StateConflict):
        gate.create(NOW + 1000)
    gate.mark_canceled(first.id)
    second = gate.create(NOW + 2000)
    assert second.id != first.id


def test_abandoned_checkout_expires(gate):
    first = gate.create(NOW)
    second = gate.create(NOW + 15 * 60 * 1000)
    assert second.id != first.id
    assert second.is_open


def test_cannot_buy_while_unlocked(gate):
    co = gate.create(NOW)
    gate.mark_paid(co.id, NOW)
    with pytest.raises(AlreadyDone):
        gate.create(NOW + 1000)
