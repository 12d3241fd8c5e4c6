"""End-to-end HTTP tests through the Flask test client."""

from __future__ import annotations

from datetime import date


def _category_id(client, headers) -> int:
    response = client.get("/categories", headers=headers)
    assert response.status_code == 200
    return response.get_json()["data"][0]["id"]


def test_register_login_logout_flow(client, auth_headers):
    headers = auth_headers(email="Flow@Example.com")

    me = client.get("/auth/user", headers=headers)
    assert me.status_code == 200
    assert me.get_json()["data"]["email"] == "flow@example.com"

    login = client.post(
        "/auth/login", json={"email": "flow@example.com", "password": "secret-pass-1"}
    )
    assert login.status_code == 200
    body = login.get_json()
    assert body["success"] is True
    assert body["data"]["token_type"] == "Bearer"

    assert client.post("/auth/logout", headers=headers).status_code == 200
    assert client.get("/auth/user", headers=headers).status_code == 401


def test_wrong_password_is_rejected(client, auth_headers):
    auth_headers(email="pw@example.com")

    response = client.post("/auth/login", json={"email": "pw@example.com", "password": "nope-nope"})

    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_duplicate_email_is_a_validation_error(client, auth_headers):
    auth_headers(email="dup@example.com")

    response = client.post(
        "/auth/register",
        json={
            "name": "Again",
            "email": "dup@example.com",
            "password": "secret-pass-1",
            "password_confirmation": "secret-pass-1",
        },
    )

    assert response.status_code == 422
    assert "email" in response.get_json()["error"]["fields"]


def test_protected_routes_require_a_token(client):
    response = client.get("/expenses")

    assert response.status_code == 401
    body = response.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHENTICATED"
    assert client.get("/expenses", headers={"Authorization": "Bearer bogus"}).status_code == 401


def test_unknown_route_uses_the_failure_envelope(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.get_json() == {
        "success": False,
        "message": "Resource not found",
        "error": {"code": "NOT_FOUND", "message": "Resource not found"},
    }


def test_expense_lifecycle_moves_the_balance(client, auth_headers):
    headers = auth_headers()
    category_id = _category_id(client, headers)

    added = client.post("/balance/add", json={"amount": "500", "source": "salary"}, headers=headers)
    assert added.status_code == 201
    assert added.get_json()["data"]["balance"]["current_balance"] == "500.00"

    created = client.post(
        "/expenses",
        json={"category_id": category_id, "amount": "50", "date": "2024-05-02", "note": "Dinner"},
        headers=headers,
    )
    assert created.status_code == 201
    expense = created.get_json()["data"]
    assert expense["amount"] == "50.00"
    assert expense["date"] == "2024-05-02"

    updated = client.put(f"/expenses/{expense['id']}", json={"amount": "80"}, headers=headers)
    assert updated.status_code == 200
    assert client.get("/balance", headers=headers).get_json()["data"]["current_balance"] == "420.00"

    assert client.delete(f"/expenses/{expense['id']}", headers=headers).status_code == 200
    assert client.get("/balance", headers=headers).get_json()["data"]["current_balance"] == "500.00"
    assert client.get(f"/expenses/{expense['id']}", headers=headers).status_code == 404

    ledger = client.get("/balance/transactions?type=credit", headers=headers).get_json()
    assert ledger["meta"]["total"] == 2
    assert {entry["source"] for entry in ledger["data"]} == {"salary", "refund"}


def test_deleting_an_expense_twice_refunds_once(client, auth_headers):
    headers = auth_headers()
    category_id = _category_id(client, headers)
    client.post("/balance/add", json={"amount": "1000", "source": "salary"}, headers=headers)
    expense_id = client.post(
        "/expenses",
        json={"category_id": category_id, "amount": "150", "date": "2024-05-02"},
        headers=headers,
    ).get_json()["data"]["id"]

    assert client.delete(f"/expenses/{expense_id}", headers=headers).status_code == 200
    second = client.delete(f"/expenses/{expense_id}", headers=headers)
    assert second.status_code == 404
    assert second.get_json()["error"]["code"] == "NOT_FOUND"
    assert client.put(
        f"/expenses/{expense_id}", json={"amount": "10"}, headers=headers
    ).status_code == 404
    assert client.get("/balance", headers=headers).get_json()["data"]["current_balance"] == "1000.00"


def test_invalid_expense_lists_field_errors(client, auth_headers):
    headers = auth_headers()

    response = client.post("/expenses", json={"amount": "-3"}, headers=headers)

    assert response.status_code == 422
    fields = response.get_json()["error"]["fields"]
    assert {"category_id", "amount", "date"} <= set(fields)


def test_other_users_expense_is_forbidden(client, auth_headers):
    owner = auth_headers(email="owner@example.com")
    intruder = auth_headers(email="intruder@example.com")
    created = client.post(
        "/expenses",
        json={"category_id": _category_id(client, owner), "amount": "5", "date": "2024-01-01"},
        headers=owner,
    ).get_json()["data"]

    response = client.delete(f"/expenses/{created['id']}", headers=intruder)

    assert response.status_code == 403
    assert response.get_json()["error"]["code"] == "UNAUTHORIZED"


def test_arabic_accept_language_localizes_messages(client):
    response = client.get("/expenses", headers={"Accept-Language": "ar"})

    assert response.status_code == 401
    assert response.get_json()["message"] == "غير مصادق"
    assert response.headers["Content-Language"] == "ar"


def test_default_category_cannot_be_deleted(client, auth_headers):
    headers = auth_headers()

    response = client.delete(f"/categories/{_category_id(client, headers)}", headers=headers)

    assert response.status_code == 403
    assert response.get_json()["error"]["code"] == "CANNOT_DELETE_DEFAULT"


def test_debt_overpayment_returns_422(client, auth_headers):
    headers = auth_headers()
    debt = client.post(
        "/debts",
        json={"debtor_name": "Jordan", "total_amount": "100", "start_date": "2024-01-01"},
        headers=headers,
    ).get_json()["data"]

    response = client.post(
        f"/debts/{debt['id']}/payments",
        json={"amount": "150", "payment_date": "2024-02-01"},
        headers=headers,
    )

    assert response.status_code == 422
    assert response.get_json()["error"]["code"] == "PAYMENT_EXCEEDS_REMAINING"


def test_target_purchase_requires_balance(client, auth_headers):
    headers = auth_headers()
    target = client.post(
        "/targets", json={"name": "Bike", "price": "300"}, headers=headers
    ).get_json()["data"]
    assert target["can_afford"] is False
    assert target["amount_needed"] == "300.00"

    refused = client.post(f"/targets/{target['id']}/purchase", headers=headers)
    assert refused.status_code == 400
    assert refused.get_json()["error"]["code"] == "INSUFFICIENT_BALANCE"

    client.post("/balance/add", json={"amount": "350", "source": "gift"}, headers=headers)
    bought = client.post(f"/targets/{target['id']}/purchase", headers=headers)
    assert bought.status_code == 200
    assert bought.get_json()["data"]["new_balance"] == "50.00"


def test_target_update_cannot_mark_it_completed(client, auth_headers):
    headers = auth_headers()
    client.post("/balance/add", json={"amount": "500", "source": "gift"}, headers=headers)
    target = client.post(
        "/targets", json={"name": "Bike", "price": "300"}, headers=headers
    ).get_json()["data"]

    response = client.put(f"/targets/{target['id']}", json={"status": "completed"}, headers=headers)

    assert response.status_code == 422
    assert "status" in response.get_json()["error"]["fields"]
    assert client.get(f"/targets/{target['id']}", headers=headers).get_json()["data"]["status"] == "active"
    assert client.get("/balance", headers=headers).get_json()["data"]["current_balance"] == "500.00"
    assert client.get("/balance/transactions", headers=headers).get_json()["meta"]["total"] == 1


def test_forgiven_lending_rejects_amount_changes(client, auth_headers):
    headers = auth_headers()
    client.post("/balance/add", json={"amount": "500", "source": "salary"}, headers=headers)
    lending = client.post(
        "/lendings",
        json={"borrower_name": "Sam", "amount": "100", "lending_date": "2024-04-01"},
        headers=headers,
    ).get_json()["data"]
    client.post(f"/lendings/{lending['id']}/forgive", headers=headers)

    response = client.put(f"/lendings/{lending['id']}", json={"amount": "300"}, headers=headers)

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "LENDING_FORGIVEN"
    stored = client.get(f"/lendings/{lending['id']}", headers=headers).get_json()["data"]
    assert stored["status"] == "forgiven"
    assert stored["remaining_amount"] == "0.00"


def test_csv_export_downloads_an_attachment(client, auth_headers):
    headers = auth_headers()
    client.post(
        "/expenses",
        json={
            "category_id": _category_id(client, headers),
            "amount": "12.5",
            "date": date.today().isoformat(),
        },
        headers=headers,
    )

    response = client.get("/export/csv", headers=headers)

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/csv; charset=utf-8"
    assert response.headers["Content-Disposition"].startswith('attachment; filename="expenses_')
    lines = response.get_data(as_text=True).splitlines()
    assert lines[0] == "Date,Category,Amount,Note"
    assert len(lines) == 2

    history = client.get("/export/history", headers=headers).get_json()
    assert history["meta"]["total"] == 1


def test_reversed_export_range_is_rejected(client, auth_headers):
    headers = auth_headers()

    response = client.get(
        "/export/csv?date_from=2024-05-01&date_to=2024-04-01", headers=headers
    )

    assert response.status_code == 422


def test_pdf_export_is_not_implemented(client, auth_headers):
    response = client.get("/export/pdf", headers=auth_headers())

    assert response.status_code == 501
    assert response.get_json()["error"]["code"] == "NOT_IMPLEMENTED"


def test_dashboard_trend_limit_is_validated(client, auth_headers):
    headers = auth_headers()

    assert client.get("/dashboard/trends?limit=13", headers=headers).status_code == 422
    response = client.get("/dashboard/trends?limit=3", headers=headers)
    assert response.status_code == 200
    assert len(response.get_json()["data"]["trends"]) == 3


def test_currency_preference_round_trip(client, auth_headers):
    headers = auth_headers()

    response = client.put("/currencies/set", json={"currency_code": "EUR"}, headers=headers)

    assert response.status_code == 200
    active = client.get("/currencies/active", headers=headers).get_json()["data"]
    assert active["code"] == "EUR"
    assert client.get("/currencies/default", headers=headers).get_json()["data"]["code"] != "EUR"
