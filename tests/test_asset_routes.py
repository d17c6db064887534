from __future__ import annotations

import uuid
from decimal import Decimal


def test_create_asset_defaults_balance_to_initial(api):
    response = api.post("/api/assets", json={"name": "Savings", "type": "BANK", "initialBalance": 250})

    assert response.status_code == 201
    body = response.get_json()
    assert body["name"] == "Savings"
    assert body["balance"] == 250.0
    assert body["initialBalance"] == 250.0


def test_create_asset_with_different_balance_records_adjustment(api):
    created = api.post(
        "/api/assets", json={"name": "Wallet", "type": "CASH", "initialBalance": 0, "balance": 40}
    ).get_json()

    history = api.get(f"/api/asset-balance-history?assetId={created['id']}").get_json()

    assert created["balance"] == 40.0
    assert [entry["reason"] for entry in history] == ["MANUAL_ADJUSTMENT"]
    assert history[0]["changeAmount"] == 40.0


def test_create_asset_validates_payload(api):
    response = api.post("/api/assets", json={"type": "GOLD"})

    assert response.status_code == 400
    assert set(response.get_json()["fields"]) == {"name", "type"}


def test_list_assets_only_returns_own(api, asset_factory, user_factory):
    asset_factory(name="Mine")
    asset_factory(name="Theirs", owner=user_factory("someone-else"))

    names = [row["name"] for row in api.get("/api/assets").get_json()]

    assert names == ["Mine"]


def test_manual_balance_edit_is_recorded(api, asset_factory, balance_of):
    asset = asset_factory(balance=100)

    response = api.put(f"/api/assets?id={asset.id}", json={"balance": 80})

    assert response.status_code == 200
    assert balance_of(asset.id) == Decimal("80.00")
    history = api.get(f"/api/asset-balance-history?assetId={asset.id}").get_json()
    assert history[0]["reason"] == "MANUAL_ADJUSTMENT"
    assert history[0]["previousBalance"] == 100.0
    assert history[0]["newBalance"] == 80.0


def test_initial_balance_edit_shifts_running_balance(api, asset_factory, category_factory, balance_of):
    asset = asset_factory(balance=100)
    category = category_factory()
    api.post(
        "/api/transactions",
        json={
            "date": "2024-01-01",
            "type": "EXPENSE",
            "amount": 30,
            "assetId": str(asset.id),
            "categoryId": str(category.id),
        },
    )

    body = api.put(f"/api/assets?id={asset.id}", json={"initialBalance": 150}).get_json()

    assert body["initialBalance"] == 150.0
    assert balance_of(asset.id) == Decimal("120.00")


def test_rename_does_not_touch_balance(api, asset_factory, balance_of):
    asset = asset_factory(balance=100)

    body = api.put(f"/api/assets?id={asset.id}", json={"name": "Renamed"}).get_json()

    assert body["name"] == "Renamed"
    assert balance_of(asset.id) == Decimal("100.00")
    assert api.get(f"/api/asset-balance-history?assetId={asset.id}").get_json() == []


def test_update_unknown_asset_is_not_found(api):
    response = api.put(f"/api/assets?id={uuid.uuid4()}", json={"name": "x"})

    assert response.status_code == 404
    assert response.get_json()["code"] == "ASSET_NOT_FOUND"


def test_delete_unused_asset(api):
    created = api.post("/api/assets", json={"name": "Temp", "type": "BANK", "balance": 5}).get_json()

    response = api.delete(f"/api/assets?id={created['id']}")

    assert response.status_code == 200
    assert api.get("/api/assets").get_json() == []


def test_delete_asset_in_use_conflicts(api, asset_factory, category_factory):
    asset = asset_factory(balance=100)
    category = category_factory()
    api.post(
        "/api/transactions",
        json={
            "date": "2024-01-01",
            "type": "INCOME",
            "amount": 1,
            "assetId": str(asset.id),
            "categoryId": str(category.id),
        },
    )

    response = api.delete(f"/api/assets?id={asset.id}")

    assert response.status_code == 409
    assert response.get_json()["code"] == "ASSET_IN_USE"


def test_history_requires_asset_id(api):
    response = api.get("/api/asset-balance-history")

    assert response.status_code == 400
    assert response.get_json()["code"] == "MISSING_ID"


def test_history_is_limited_to_latest_entries(api, asset_factory):
    asset = asset_factory(balance=0)
    for value in range(1, 13):
        api.put(f"/api/assets?id={asset.id}", json={"balance": value})

    history = api.get(f"/api/asset-balance-history?assetId={asset.id}").get_json()

    assert len(history) == 10
    assert history[0]["newBalance"] == 12.0


def test_history_of_foreign_asset_is_not_found(api, asset_factory, user_factory):
    asset = asset_factory(owner=user_factory("other"))

    response = api.get(f"/api/asset-balance-history?assetId={asset.id}")

    assert response.status_code == 404


def test_create_asset_rejects_oversized_balance(api):
    response = api.post(
        "/api/assets", json={"name": "Vault", "type": "BANK", "balance": "12345678901234567890"}
    )

    assert response.status_code == 400
    assert "balance" in response.get_json()["fields"]
