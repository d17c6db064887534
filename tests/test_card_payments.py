from __future__ import annotations

import uuid

import pytest


@pytest.fixture()
def card(asset_factory, card_factory):
    return card_factory(asset_factory(name="Bank", balance=1_000), card_type="CREDIT")


def test_list_requires_month(api):
    response = api.get("/api/card-monthly-payments")

    assert response.status_code == 400
    assert response.get_json()["code"] == "MISSING_MONTH"


def test_create_and_list_by_month(api, card):
    created = api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(card.id), "month": "2024-07", "expectedAmount": 420.5, "memo": "July bill"},
    )
    api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(card.id), "month": "2024-08", "expectedAmount": 10},
    )

    assert created.status_code == 201
    rows = api.get("/api/card-monthly-payments?month=2024-07").get_json()
    assert [(row["month"], row["expectedAmount"], row["memo"]) for row in rows] == [
        ("2024-07", 420.5, "July bill")
    ]


def test_payments_never_touch_balances(api, card, balance_of):
    api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(card.id), "month": "2024-07", "expectedAmount": 300},
    )

    assert balance_of(card.linked_asset_id) == 1000


def test_create_validates_payload(api):
    response = api.post("/api/card-monthly-payments", json={"month": "2024-07"})

    assert response.status_code == 400
    assert set(response.get_json()["fields"]) == {"cardId", "expectedAmount"}


def test_create_rejects_bad_month(api, card):
    response = api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(card.id), "month": "07/2024", "expectedAmount": 1},
    )

    assert response.status_code == 400
    assert response.get_json()["code"] == "INVALID_MONTH"


def test_create_for_unknown_card_is_not_found(api):
    response = api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(uuid.uuid4()), "month": "2024-07", "expectedAmount": 1},
    )

    assert response.status_code == 404
    assert response.get_json()["code"] == "CARD_NOT_FOUND"


def test_update_and_delete(api, card):
    created = api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(card.id), "month": "2024-07", "expectedAmount": 100},
    ).get_json()

    updated = api.put(
        f"/api/card-monthly-payments?id={created['id']}", json={"expectedAmount": 150}
    ).get_json()
    deleted = api.delete(f"/api/card-monthly-payments?id={created['id']}")

    assert updated["expectedAmount"] == 150.0
    assert deleted.get_json() == {"success": True}
    assert api.get("/api/card-monthly-payments?month=2024-07").get_json() == []


def test_delete_unknown_payment_is_not_found(api):
    response = api.delete(f"/api/card-monthly-payments?id={uuid.uuid4()}")

    assert response.status_code == 404
    assert response.get_json()["code"] == "CARD_PAYMENT_NOT_FOUND"


def test_create_rejects_oversized_amount(api, card):
    response = api.post(
        "/api/card-monthly-payments",
        json={"cardId": str(card.id), "month": "2024-07", "expectedAmount": "12345678901234567890"},
    )

    assert response.status_code == 400
    assert "expectedAmount" in response.get_json()["fields"]
