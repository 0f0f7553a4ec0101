# tests/test_promotions_api.py
API = "/api/v1/promotions"

NEW_YEAR = {
    "title": "Diskon Akhir Tahun",
    "code": "newyear25",
    "kind": "percentage",
    "value": 25,
    "min_order": 50000,
    "max_discount": 100000,
    "start_date": "2025-01-01",
    "end_date": "2025-01-31",
    "status": "active",
    "max_usage": 100,
}


def test_create_uppercases_code(client):
    resp = client.post(API, json=NEW_YEAR)

    assert resp.status_code == 201
    data = resp.json()
    assert data["code"] == "NEWYEAR25"
    assert data["usage_count"] == 0


def test_duplicate_code_conflict(client):
    client.post(API, json=NEW_YEAR)
    resp = client.post(API, json={**NEW_YEAR, "code": "NewYear25", "title": "Lagi"})
    assert resp.status_code == 409


def test_create_validation(client):
    assert client.post(API, json={**NEW_YEAR, "value": 120}).status_code == 422
    assert client.post(API, json={**NEW_YEAR, "end_date": "2024-12-01"}).status_code == 422
    assert client.post(API, json={**NEW_YEAR, "code": "NEW-YEAR"}).status_code == 422


def test_update_checks_merged_values(client):
    created = client.post(API, json=NEW_YEAR).json()

    resp = client.patch(f"{API}/{created['id']}", json={"value": 150})
    assert resp.status_code == 400

    resp = client.patch(f"{API}/{created['id']}", json={"kind": "fixed", "value": 150000, "max_discount": None})
    assert resp.status_code == 200
    assert resp.json()["kind"] == "fixed"
    assert resp.json()["max_discount"] is None

    resp = client.patch(f"{API}/{created['id']}", json={"end_date": "2024-12-31"})
    assert resp.status_code == 400


def test_list_filter_and_delete(client):
    active = client.post(API, json=NEW_YEAR).json()
    client.post(API, json={**NEW_YEAR, "code": "IRON15", "status": "draft"})

    drafts = client.get(API, params={"status": "draft"}).json()
    assert [p["code"] for p in drafts] == ["IRON15"]

    assert client.delete(f"{API}/{active['id']}").status_code == 204
    assert client.get(f"{API}/{active['id']}").status_code == 404
