import pytest

from lesson_ledger.core.enums import ChargeEffect, UnmarkPolicy
from lesson_ledger.core.exceptions import ValidationError
from lesson_ledger.ledger.factory import RefundStrategyFactory
from lesson_ledger.ledger.strategies.exact_strategy import ExactRefundStrategy
from lesson_ledger.ledger.strategies.heuristic_strategy import HeuristicRefundStrategy
from lesson_ledger.students.model import Student


def test_factory_picks_strategy_by_policy():
    factory = RefundStrategyFactory()

    assert isinstance(factory.for_policy("exact"), ExactRefundStrategy)
    assert isinstance(factory.for_policy("HEURISTIC"), HeuristicRefundStrategy)
    assert isinstance(factory.for_policy(UnmarkPolicy.HEURISTIC), HeuristicRefundStrategy)


def test_factory_rejects_unknown_policy():
    with pytest.raises(ValidationError):
        RefundStrategyFactory().for_policy("latest")


def test_heuristic_prefers_debt():
    s = Student(student_id=1, name="A", pack=3, debt=1)
    assert HeuristicRefundStrategy().decide_refund(student=s, recorded=ChargeEffect.PACK) == ChargeEffect.DEBT


def test_exact_follows_recorded_effect():
    s = Student(student_id=1, name="A", pack=3, debt=1)
    strategy = ExactRefundStrategy()

    assert strategy.decide_refund(student=s, recorded=ChargeEffect.PACK) == ChargeEffect.PACK
    assert strategy.decide_refund(student=s, recorded=ChargeEffect.DEBT) == ChargeEffect.DEBT
    assert strategy.decide_refund(student=s, recorded=None) == ChargeEffect.DEBT


def test_exact_credits_pack_when_debt_was_paid():
    s = Student(student_id=1, name="A", pack=0, debt=0)
    assert ExactRefundStrategy().decide_refund(student=s, recorded=ChargeEffect.DEBT) == ChargeEffect.PACK
