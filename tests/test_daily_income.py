"""Tests for the DailyIncome derived fields."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from src.domain.models.daily_income import DailyIncome

DAY = date(2024, 1, 10)


class TestDailyIncomeCreate:
    def test_revenue_is_turns_plus_wechat(self):
        income = DailyIncome.create(
            income_date=DAY, vehicle_id="001", conductor_id="002",
            turn1_amount=100, turn2_amount=50.5, turn5_amount=20, wechat_amount=30,
        )
        assert income.revenue == Decimal("200.5")

    def test_net_income_subtracts_fuel_and_adds_reward(self):
        income = DailyIncome.create(
            income_date=DAY, vehicle_id="001", conductor_id="002",
            turn1_amount=300, fuel_subsidy=80, reward_penalty=-15.5,
        )
        assert income.net_income == Decimal("204.5")

    def test_net_income_may_be_negative(self):
        income = DailyIncome.create(
            income_date=DAY, vehicle_id="001", conductor_id="002",
            turn1_amount=10, fuel_subsidy=50,
        )
        assert income.net_income == Decimal("-40.0")

    def test_turn_count_ignores_fifth_turn_and_zero_turns(self):
        income = DailyIncome.create(
            income_date=DAY, vehicle_id="001", conductor_id="002",
            turn1_amount=10, turn2_amount=0, turn3_amount=None, turn4_amount=5, turn5_amount=99,
        )
        assert income.turn_count == 2

    def test_entered_amounts_are_truncated_first(self):
        income = DailyIncome.create(
            income_date=DAY, vehicle_id="001", conductor_id="002",
            turn1_amount=10.19, turn2_amount=10.19, wechat_amount=0.99,
        )
        assert income.turn1_amount == Decimal("10.1")
        assert income.wechat_amount == Decimal("0.9")
        assert income.revenue == Decimal("21.1")

    def test_missing_amounts_default(self):
        income = DailyIncome.create(income_date=DAY, vehicle_id="001", conductor_id="001")
        assert income.turn1_amount is None
        assert income.wechat_amount == Decimal("0")
        assert income.revenue == Decimal("0")
        assert income.net_income == Decimal("0")
        assert income.turn_count == 0

    def test_turn_total_excludes_wechat(self):
        income = DailyIncome.create(
            income_date=DAY, vehicle_id="001", conductor_id="002",
            turn1_amount=1, turn3_amount=2, wechat_amount=100,
        )
        assert income.turn_total == Decimal("3.0")

    def test_to_dict_uses_iso_date_and_floats(self):
        income = DailyIncome.create(income_date=DAY, vehicle_id="001", conductor_id="002", turn1_amount=12.3)
        data = income.to_dict()
        assert data["date"] == "2024-01-10"
        assert data["revenue"] == 12.3
        assert data["turn2_amount"] is None
