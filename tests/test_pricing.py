import pytest

from rentmimi.domain.pricing.calculator import (
    calculate_extension_cost,
    calculate_total_cost,
    get_plan_rate,
)


def test_plan_rate_times_hours_plus_flat_options():
    assert calculate_total_cost("PREMIUM", 2, ["handHolding"]) == 190000


def test_options_are_not_scaled_by_duration():
    one_hour = calculate_total_cost("FRESH", 1, ["instantPhotos", "drive"])
    five_hours = calculate_total_cost("FRESH", 5, ["instantPhotos", "drive"])
    assert one_hour == 50000 + 80000
    assert five_hours - one_hour == 4 * 50000


def test_the_black_rate():
    assert get_plan_rate("THE_BLACK") == 150000
    assert calculate_total_cost("THE_BLACK", 3) == 450000


@pytest.mark.parametrize("hours", [0, -1])
def test_non_positive_duration_is_rejected(hours):
    with pytest.raises(ValueError):
        calculate_total_cost("PREMIUM", hours)


def test_unknown_plan_is_rejected():
    with pytest.raises(ValueError):
        calculate_total_cost("GOLDEN", 2)


def test_unknown_option_is_rejected():
    with pytest.raises(ValueError):
        calculate_total_cost("PREMIUM", 2, ["jetski"])


def test_extension_cost_ignores_options():
    assert calculate_extension_cost("SPECIAL", 2) == 120000
    with pytest.raises(ValueError):
        calculate_extension_cost("SPECIAL", 0)


def test_quote_endpoint(client):
    response = client.post(
        "/pricing/quote",
        json={"plan": "PREMIUM", "duration": "2", "options": {"handHolding": True}},
    )
    assert response.status_code == 200
    assert response.json() == {"plan": "PREMIUM", "duration": 2, "totalCost": 190000}


def test_quote_endpoint_rejects_bad_duration(client):
    response = client.post("/pricing/quote", json={"plan": "PREMIUM", "duration": "abc"})
    assert response.status_code == 400


def test_catalog_lists_plans_and_options(client):
    data = client.get("/pricing/catalog").json()
    assert {p["key"] for p in data["plans"]} == {"FRESH", "SPECIAL", "PREMIUM", "THE_BLACK"}
    assert {"key": "instantPhotos", "price": 30000} in data["options"]
