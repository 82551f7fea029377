import random
from decimal import Decimal

from models import Balance, Settlement
from settlement import apply_settlements, creditors_of, plan_settlements


def balances(**amounts):
    return [Balance(mid, mid.lower(), Decimal(str(v))) for mid, v in amounts.items()]


def as_tuples(plan):
    return [(s.from_member, s.to_member, s.amount) for s in plan]


def test_three_way_settlement():
    plan = plan_settlements(balances(A=-40, B=-20, C=60))
    assert as_tuples(plan) == [("A", "C", Decimal("40.00")), ("B", "C", Decimal("20.00"))]


def test_ties_keep_input_order():
    plan = plan_settlements(balances(A=60, B=-30, C=-30))
    assert as_tuples(plan) == [("B", "A", Decimal("30.00")), ("C", "A", Decimal("30.00"))]

    plan = plan_settlements(balances(A=60, C=-30, B=-30))
    assert as_tuples(plan) == [("C", "A", Decimal("30.00")), ("B", "A", Decimal("30.00"))]


def test_names_are_carried():
    plan = plan_settlements([Balance("A", "Alice", Decimal("5")), Balance("B", "Bob", Decimal("-5"))])
    assert plan == [Settlement("B", "A", Decimal("5.00"), "Bob", "Alice")]


def test_largest_debtor_pays_largest_creditor_first():
    plan = plan_settlements(balances(A=10, B=-25, C=-5, D=20))
    assert as_tuples(plan) == [
        ("B", "D", Decimal("20.00")),
        ("B", "A", Decimal("5.00")),
        ("C", "A", Decimal("5.00")),
    ]


def test_empty_and_settled_input():
    assert plan_settlements([]) == []
    assert plan_settlements(balances(A=0, B=0)) == []
    assert plan_settlements(balances(A="0.00", B="0.001")) == []


def test_one_cent_balances_still_settle():
    plan = plan_settlements(balances(A="0.01", B="-0.01"))
    assert as_tuples(plan) == [("B", "A", Decimal("0.01"))]


def test_plan_zeroes_balances_within_bound():
    rng = random.Random(7)
    for _ in range(200):
        n = rng.randint(2, 8)
        cents = [rng.randint(-50000, 50000) for _ in range(n - 1)]
        cents.append(-sum(cents))
        bal = [Balance(f"m{i}", f"m{i}", Decimal(c) / 100) for i, c in enumerate(cents)]

        plan = plan_settlements(bal)

        nonzero = sum(1 for c in cents if c != 0)
        assert len(plan) <= max(0, nonzero - 1)
        assert all(s.amount > 0 for s in plan)
        after = apply_settlements(bal, plan)
        assert all(abs(v) <= Decimal("0.01") for v in after.values())


def test_plan_is_deterministic():
    bal = balances(A="12.50", B="-7.25", C="-5.25", D="3.00", E="-3.00")
    assert plan_settlements(bal) == plan_settlements(list(bal))


def test_creditors_of():
    bal = balances(A=60, B=-30, C=-30)
    assert [b.member_id for b in creditors_of("B", bal)] == ["A"]
    assert creditors_of("A", bal) == []
    assert creditors_of("X", bal) == []
