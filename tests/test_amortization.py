import pytest

from household_ledger.amortization import amortization_payment, amortization_schedule
from household_ledger.models import RepaymentMethod


def test_equal_payment_annuity():
    payment = amortization_payment(12_000_000, 6, 12, RepaymentMethod.EQUAL_PAYMENT)

    assert payment == pytest.approx(1_032_797.16, abs=0.5)
    assert payment == pytest.approx(1_032_800, rel=1e-5)


def test_zero_rate_is_exactly_principal_over_term():
    assert amortization_payment(1_200_000, 0, 12) == 100_000
    assert amortization_payment(1_000_000, 0, 3) == 1_000_000 / 3


def test_equal_principal_and_bullet_first_payment():
    assert amortization_payment(12_000_000, 6, 12, 'EQUAL_PRINCIPAL') == pytest.approx(1_060_000)
    assert amortization_payment(12_000_000, 6, 12, RepaymentMethod.BULLET) == pytest.approx(60_000)
    # legacy spelling of the bullet method
    assert amortization_payment(12_000_000, 6, 12, 'BULK') == pytest.approx(60_000)


@pytest.mark.parametrize('term', [0, -12])
def test_non_positive_term_is_rejected(term):
    with pytest.raises(ValueError):
        amortization_payment(1_000_000, 5, term)


def test_negative_principal_is_rejected():
    with pytest.raises(ValueError):
        amortization_schedule(-1, 5, 12)


def test_equal_payment_schedule_repays_principal():
    schedule = amortization_schedule(12_000_000, 6, 12)

    assert list(schedule.columns) == ['Month', 'Payment', 'Principal', 'Interest', 'Balance']
    assert list(schedule['Month']) == list(range(1, 13))
    assert list(schedule['Payment']) == pytest.approx([amortization_payment(12_000_000, 6, 12)] * 12)
    assert schedule['Principal'].sum() == pytest.approx(12_000_000)
    assert schedule.loc[0, 'Interest'] == pytest.approx(60_000)
    assert schedule['Interest'].is_monotonic_decreasing
    assert schedule['Balance'].iloc[-1] == pytest.approx(0, abs=1e-3)


def test_equal_principal_schedule():
    schedule = amortization_schedule(12_000_000, 6, 12, RepaymentMethod.EQUAL_PRINCIPAL)

    assert list(schedule['Principal']) == pytest.approx([1_000_000] * 12)
    assert schedule.loc[0, 'Payment'] == pytest.approx(amortization_payment(12_000_000, 6, 12, 'EQUAL_PRINCIPAL'))
    assert schedule.loc[11, 'Interest'] == pytest.approx(5_000)
    assert schedule['Balance'].iloc[-1] == 0


def test_bullet_schedule_repays_everything_at_maturity():
    schedule = amortization_schedule(12_000_000, 6, 12, RepaymentMethod.BULLET)

    assert list(schedule['Interest']) == pytest.approx([60_000] * 12)
    assert schedule['Principal'].iloc[:-1].sum() == 0
    assert schedule['Principal'].iloc[-1] == 12_000_000
    assert list(schedule['Balance'].iloc[:-1]) == pytest.approx([12_000_000] * 11)
    assert schedule['Balance'].iloc[-1] == 0


def test_zero_rate_schedule():
    schedule = amortization_schedule(1_200_000, 0, 12)

    assert list(schedule['Payment']) == pytest.approx([100_000] * 12)
    assert schedule['Interest'].sum() == 0
    assert schedule['Balance'].iloc[-1] == 0
