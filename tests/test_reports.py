from conftest import add_booking, add_partner, add_user, as_user

from rentmimi.domain.payouts.calculator import compute_payout
from rentmimi.domain.reports.service import ReportService
from rentmimi.schemas import BookingOptions, ClientReview


def test_monthly_stats_use_the_payout_formula(store):
    client_user = add_user(store, "01011110000")
    gold = add_partner(store, "01022220000", grade="GOLD")
    bronze = add_partner(store, "01033330000", grade="BRONZE")
    add_booking(
        store, client_user, mimi=gold.applicant, status="completed",
        total_cost=190000, options=BookingOptions(pool=True), date="2025-03-01",
    )
    add_booking(
        store, client_user, mimi=bronze.applicant, status="completed",
        total_cost=140000, date="2025-03-20",
    )
    add_booking(store, client_user, mimi=gold.applicant, status="completed", date="2025-04-01")
    add_booking(store, client_user, mimi=gold.applicant, status="approved", date="2025-03-02")

    stats = ReportService(store).monthly_stats("2025-03")
    assert stats.completedCount == 2
    assert stats.totalRevenue == 330000
    assert stats.partnerPayout == 154720 + compute_payout("BRONZE", 2)
    assert stats.netProfit == stats.totalRevenue - stats.partnerPayout


def test_partner_activity_and_next_grade(store):
    client_user = add_user(store, "01011110000")
    application = add_partner(store, "01022220000", grade="BRONZE")
    for day, rating in [("2025-02-10", 5), ("2025-03-01", 4), ("2025-03-15", None)]:
        add_booking(
            store, client_user, mimi=application.applicant, status="completed", date=day,
            review=ClientReview(rating=rating) if rating else None,
        )

    activity = ReportService(store).partner_activity(application)
    assert activity.totalDates == 3
    assert activity.averageRating == 4.5
    assert activity.monthlyCounts == {"2025-02": 1, "2025-03": 2}
    assert activity.nextGrade.nextGrade == "SILVER"
    assert activity.nextGrade.requiredDates == 10
    assert activity.nextGrade.eligible is False


def test_top_grade_has_no_next(store):
    application = add_partner(store, "01022220000", grade="PLATINUM")
    activity = ReportService(store).partner_activity(application)
    assert activity.nextGrade is None
    assert activity.averageRating == 0


def test_report_endpoints(client, store):
    add_user(store, "01000000000", roles=("admin",))
    add_partner(store, "01022220000")

    monthly = client.get("/reports/monthly?month=2025-03", headers=as_user("01000000000"))
    assert monthly.json()["completedCount"] == 0
    assert client.get("/reports/monthly?month=March", headers=as_user("01000000000")).status_code == 422
    assert client.get("/reports/activity", headers=as_user("01022220000")).json()["grade"] == "BRONZE"
    assert client.get("/reports/monthly", headers=as_user("01022220000")).status_code == 403
