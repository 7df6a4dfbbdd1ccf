from conftest import add_partner, add_user, as_user

CLIENT = "01011110000"
PARTNER = "01022220000"
ADMIN = "01000000000"


def sign_up(client, phone, nickname="tester"):
    return client.post("/users", json={"phone": phone, "nickname": nickname, "region": "서울"})


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_sign_up_normalizes_phone(client):
    response = sign_up(client, "+82 10-1111-0000")
    assert response.status_code == 201
    assert response.json()["phone"] == CLIENT
    assert response.json()["roles"] == ["client"]

    assert client.get(f"/users/exists/{CLIENT}").json() == {"exists": True}
    assert sign_up(client, CLIENT).status_code == 409


def test_invalid_phone_is_rejected(client):
    assert sign_up(client, "12345").status_code == 422


def test_requests_need_a_known_user(client):
    assert client.get("/users/me").status_code == 401
    assert client.get("/users/me", headers=as_user(CLIENT)).status_code == 401


def test_partner_application_grants_role(client):
    sign_up(client, PARTNER, "지수")
    response = client.post(
        "/partners/applications",
        headers=as_user(PARTNER),
        json={
            "name": "지수",
            "region": "강남",
            "availableDays": ["토"],
            "availableDates": ["2025-03-08", "2025-03-05", "2025-03-05"],
            "styles": ["청순"],
        },
    )
    assert response.status_code == 201
    application = response.json()
    assert application["formData"]["grade"] == "BRONZE"
    assert application["formData"]["availableForBooking"] is True
    assert application["formData"]["availableDates"] == ["2025-03-05", "2025-03-08"]
    assert "partner" in client.get("/users/me", headers=as_user(PARTNER)).json()["roles"]

    again = client.post("/partners/applications", headers=as_user(PARTNER), json={"name": "지수"})
    assert again.status_code == 409


def test_partner_toggles_availability(client, store):
    add_partner(store, PARTNER)
    response = client.post("/partners/me/availability/toggle", headers=as_user(PARTNER))
    assert response.json()["formData"]["availableForBooking"] is False

    add_user(store, ADMIN, roles=("admin",))
    admin_view = client.get("/partners/applications?bookableOnly=true", headers=as_user(ADMIN))
    assert admin_view.json() == []


def test_admin_sets_grade_and_public_profile(client, store):
    add_user(store, ADMIN, roles=("admin",))
    application = add_partner(store, PARTNER, name="실명")

    graded = client.put(
        f"/partners/applications/{application.id}/grade", headers=as_user(ADMIN), json={"grade": "GOLD"}
    )
    assert graded.json()["formData"]["grade"] == "GOLD"

    client.put(
        f"/partners/applications/{application.id}/public-profile",
        headers=as_user(ADMIN),
        json={"name": "미미", "age": "25", "intro": "안녕하세요", "region": "홍대"},
    )
    client.post(f"/partners/applications/{application.id}/recommend", headers=as_user(ADMIN))

    [listing] = client.get("/partners/recommended").json()
    assert listing["name"] == "미미"
    assert listing["region"] == "홍대"
    assert listing["isRecommended"] is True


def test_partner_search_needs_both_coordinates(client):
    assert client.get("/partners?lat=37.5").status_code == 400


def test_booking_flow_over_http(client, store, notifier):
    add_user(store, CLIENT)
    add_user(store, ADMIN, roles=("admin",))
    application = add_partner(store, PARTNER, grade="GOLD")

    created = client.post(
        "/bookings",
        headers=as_user(CLIENT),
        json={
            "date": "2025-03-01",
            "time": "14:00",
            "duration": "2",
            "plan": "PREMIUM",
            "location": "강남역",
            "options": {"pool": True},
            "agreeToTerms": True,
        },
    )
    assert created.status_code == 201
    booking = created.json()
    assert booking["totalCost"] == 190000
    assert booking["status"] == "pending"
    booking_id = booking["id"]

    refused = client.post(
        f"/bookings/{booking_id}/status",
        headers=as_user(ADMIN),
        json={"status": "awaiting_payment", "actingAs": "admin"},
    )
    assert refused.status_code == 400

    client.post(
        f"/bookings/{booking_id}/assign",
        headers=as_user(ADMIN),
        json={"partnerApplicationId": application.id},
    )
    for status, actor, phone in [
        ("awaiting_payment", "partner", PARTNER),
        ("approved", "admin", ADMIN),
        ("completed", "admin", ADMIN),
    ]:
        response = client.post(
            f"/bookings/{booking_id}/status",
            headers=as_user(phone),
            json={"status": status, "actingAs": actor},
        )
        assert response.status_code == 200, response.text
        assert response.json()["status"] == status

    assert client.get(f"/bookings/{booking_id}", headers=as_user(CLIENT)).json()["payoutStatus"] == "pending"

    [line] = client.get("/payouts/pending", headers=as_user(ADMIN)).json()
    assert line["amount"] == 154720
    settled = client.post(f"/payouts/{booking_id}/complete", headers=as_user(ADMIN))
    assert settled.json()["payoutStatus"] == "completed"
    assert client.get("/payouts/pending", headers=as_user(ADMIN)).json() == []

    review = client.put(
        f"/bookings/{booking_id}/review", headers=as_user(CLIENT), json={"rating": 5, "comment": "좋아요"}
    )
    assert review.json()["review"]["rating"] == 5

    notifications = client.get("/users/me/notifications", headers=as_user(PARTNER)).json()
    assert {n["event"] for n in notifications} == {"booking_created", "payout_ready"}


def test_terminal_booking_cannot_move(client, store):
    add_user(store, CLIENT)
    application = add_partner(store, PARTNER)
    created = client.post(
        "/bookings",
        headers=as_user(CLIENT),
        json={
            "date": "2025-03-01",
            "location": "신촌",
            "mimiApplicationId": application.id,
            "agreeToTerms": True,
        },
    ).json()

    rejected = client.post(
        f"/bookings/{created['id']}/status",
        headers=as_user(PARTNER),
        json={"status": "rejected", "actingAs": "partner"},
    )
    assert rejected.json()["status"] == "rejected"

    again = client.post(
        f"/bookings/{created['id']}/status",
        headers=as_user(PARTNER),
        json={"status": "awaiting_payment", "actingAs": "partner"},
    )
    assert again.status_code == 409


def test_booking_visibility(client, store):
    add_user(store, CLIENT)
    add_user(store, "01099990000")
    created = client.post(
        "/bookings",
        headers=as_user(CLIENT),
        json={"date": "2025-03-01", "location": "신촌", "agreeToTerms": True},
    ).json()

    assert client.get(f"/bookings/{created['id']}", headers=as_user("01099990000")).status_code == 404
    assert len(client.get("/bookings", headers=as_user(CLIENT)).json()) == 1
    assert client.get("/bookings?view=admin", headers=as_user(CLIENT)).status_code == 403


def test_available_dates_are_deduplicated_and_sorted(client, store):
    add_partner(store, PARTNER, available_dates=["2025-01-01"])

    response = client.put(
        "/partners/me/available-dates",
        headers=as_user(PARTNER),
        json={"availableDates": ["2025-03-08", "2025-03-01", "2025-03-08"]},
    )
    assert response.status_code == 200
    assert response.json()["formData"]["availableDates"] == ["2025-03-01", "2025-03-08"]

    invalid = client.put(
        "/partners/me/available-dates",
        headers=as_user(PARTNER),
        json={"availableDates": ["2025-03-01", "2025-02-30"]},
    )
    assert invalid.status_code == 422
    stored = store.find_application_by_phone(PARTNER).form_data.available_dates
    assert stored == ["2025-03-01", "2025-03-08"]
