from decimal import Decimal

from loan_compare.data_models import PeriodRecord
from loan_compare.engine import generate_bullet, generate_equal_payment, generate_equal_principal
from loan_compare.summary import summarize_schedule
from loan_compare.utils import monthly_rate


class TestSummarizeSchedule:
    def test_equal_principal_totals(self, principal, rate_per_month):
        summary = summarize_schedule(generate_equal_principal(principal, rate_per_month, 12), principal)
        # Interest 12,000 + 11,000 + ... + 1,000
        assert summary.total_interest == Decimal("78000")
        assert summary.total_payment == Decimal("1278000")
        assert summary.total_principal_paid == principal
        assert summary.first_payment == Decimal("112000")
        assert summary.last_payment == Decimal("101000")
        assert summary.max_payment == Decimal("112000")
        assert summary.avg_payment == Decimal("106500")
        assert summary.final_balance == 0

    def test_equal_payment_totals(self, rate_per_month):
        p = Decimal("1000000")
        summary = summarize_schedule(generate_equal_payment(p, rate_per_month, 12), p)
        assert summary.total_payment == Decimal("1066188")
        assert summary.total_interest == Decimal("66188")

    def test_bullet_totals(self):
        p = Decimal("300000000")
        summary = summarize_schedule(generate_bullet(p, monthly_rate(Decimal("4.5")), 360), p)
        assert summary.total_interest == Decimal("405000000")
        assert summary.total_payment == Decimal("705000000")
        assert summary.max_payment == Decimal("301125000")
        assert summary.first_payment == Decimal("1125000")

    def test_total_interest_is_derived_from_total_payment(self):
        # Interest column sums to 21 but payments only to 1,020
        schedule = [
            PeriodRecord(period=1, payment=Decimal("510"), principal=Decimal("500"), interest=Decimal("11"), balance=Decimal("500")),
            PeriodRecord(period=2, payment=Decimal("510"), principal=Decimal("500"), interest=Decimal("10"), balance=Decimal("0")),
        ]
        summary = summarize_schedule(schedule, Decimal("1000"))
        assert summary.total_payment == Decimal("1020")
        assert summary.total_interest == Decimal("20")
        assert summary.raw_interest_sum == Decimal("21")
        assert summary.total_payment == Decimal("1000") + summary.total_interest

    def test_empty_schedule(self):
        summary = summarize_schedule([], Decimal("1000000"))
        assert summary.total_payment == 0
        assert summary.total_interest == 0
        assert summary.first_payment == 0
        assert summary.final_balance == 0
