import math

import pytest

from src.adapters.memory_ledger import InMemoryLedgerStore
from src.components.envelopes import (
    DistributionShare,
    EnvelopeLedger,
    InsufficientFundsError,
    LedgerConfig,
    NotFoundError,
    PercentageSumError,
    ValidationError,
)


@pytest.fixture
def ledger() -> EnvelopeLedger:
    return EnvelopeLedger(InMemoryLedgerStore())


def _consistent(ledger: EnvelopeLedger) -> bool:
    snapshot = ledger.list_all()
    return math.isclose(
        snapshot.total_budget,
        math.fsum(e.budget for e in snapshot.envelopes),
        abs_tol=1e-9,
    )


# --- R1: Running total matches envelope budgets ---
def test_R1_total_tracks_every_operation(ledger: EnvelopeLedger) -> None:
    """R1: After each successful operation total == sum of budgets."""
    a = ledger.create("Groceries", 200)
    b = ledger.create("Rent", 800)
    c = ledger.create("Fun", 0)
    assert _consistent(ledger)

    ledger.update(a.id, budget=250)
    assert _consistent(ledger)

    ledger.subtract(b.id, 125.5)
    assert _consistent(ledger)

    ledger.transfer(b.id, c.id, 74.5)
    assert _consistent(ledger)

    ledger.distribute(
        300,
        [
            DistributionShare(a.id, 33.33),
            DistributionShare(b.id, 33.33),
            DistributionShare(c.id, 33.34),
        ],
    )
    assert _consistent(ledger)

    ledger.delete(a.id)
    assert _consistent(ledger)


def test_R1_failed_operations_change_nothing(ledger: EnvelopeLedger) -> None:
    """R1: Rejected operations leave budgets and total untouched."""
    a = ledger.create("A", 50)
    b = ledger.create("B", 50)
    before = ledger.list_all()

    with pytest.raises(InsufficientFundsError):
        ledger.subtract(a.id, 51)
    with pytest.raises(InsufficientFundsError):
        ledger.transfer(a.id, b.id, 51)
    with pytest.raises(ValidationError):
        ledger.update(a.id, title="", budget=10)
    with pytest.raises(NotFoundError):
        ledger.distribute(10, [DistributionShare(a.id, 50), DistributionShare(99, 50)])

    assert ledger.list_all() == before


# --- R2: Transfers conserve the total ---
def test_R2_transfer_conserves_total(ledger: EnvelopeLedger) -> None:
    """R2: Transfers move money without creating or destroying it."""
    a = ledger.create("A", 100)
    b = ledger.create("B", 0)
    total = ledger.list_all().total_budget

    for _ in range(10):
        ledger.transfer(a.id, b.id, 10)

    snapshot = ledger.list_all()
    assert snapshot.total_budget == total
    assert [e.budget for e in snapshot.envelopes] == [0, 100]


# --- R3: Percentage tolerance boundaries ---
@pytest.mark.parametrize(
    "second,accepted",
    [
        (40.0, True),
        (40.009, True),
        (39.991, True),
        (40.02, False),
        (39.98, False),
    ],
)
def test_R3_percentage_tolerance(ledger: EnvelopeLedger, second: float, accepted: bool) -> None:
    """R3: Percentages within 0.01 of 100 are accepted."""
    a = ledger.create("A", 0)
    b = ledger.create("B", 0)
    shares = [DistributionShare(a.id, 60), DistributionShare(b.id, second)]

    if accepted:
        result = ledger.distribute(100, shares)
        assert result.total_distributed == 100
    else:
        with pytest.raises(PercentageSumError):
            ledger.distribute(100, shares)
        assert ledger.list_all().total_budget == 0


# --- R4: Non-atomic distribution keeps partial shares ---
def test_R4_non_atomic_distribution_drift() -> None:
    """R4: With atomic distribution off, applied shares stay and total lags."""
    ledger = EnvelopeLedger(InMemoryLedgerStore(), LedgerConfig(atomic_distribute=False))
    a = ledger.create("A", 0)

    with pytest.raises(NotFoundError):
        ledger.distribute(100, [DistributionShare(a.id, 50), DistributionShare(404, 50)])

    snapshot = ledger.list_all()
    assert snapshot.envelopes[0].budget == 50
    assert snapshot.total_budget == 0
    assert not _consistent(ledger)


# --- R5: Ids are never reused ---
def test_R5_ids_monotonic(ledger: EnvelopeLedger) -> None:
    """R5: Deleting an envelope never frees its id."""
    ids = [ledger.create(f"E{i}", 1).id for i in range(3)]
    ledger.delete(ids[-1])

    assert ledger.create("Next", 1).id == ids[-1] + 1
