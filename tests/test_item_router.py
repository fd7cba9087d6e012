"""
Integration tests for the /api/items router.

Covers:
  - totalAmount derived on create and re-derived on partial updates
  - Discount bounded by the merged baseAmount; failed updates leave the item untouched
  - Exactly one owner, and it must exist; moving between owners
  - Listing by owner, search returning every match
"""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.usefixtures("db")

CARBONARA = {
    "name": "Spaghetti Carbonara",
    "image": "https://example.com/carbonara.jpg",
    "description": "Creamy pasta with bacon",
    "taxApplicability": True,
    "tax": 12,
    "taxType": "percentage",
    "baseAmount": 18.99,
    "discount": 2.00,
}


def _create(client: TestClient, **overrides) -> dict:
    resp = client.post("/api/items", json={**CARBONARA, **overrides})
    assert resp.status_code == 201, resp.json()
    return resp.json()["data"]


def _stored(client: TestClient, item_id) -> dict:
    return client.get(f"/api/items/{item_id}").json()["data"]


class TestCreateItem:
    def test_total_is_derived(self, client: TestClient, sub_category):
        resp = client.post(
            "/api/items", json={**CARBONARA, "subCategoryId": str(sub_category.id)}
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Item created successfully"
        data = body["data"]
        assert data["baseAmount"] == 18.99
        assert data["discount"] == 2.0
        assert data["totalAmount"] == 16.99
        assert data["subCategoryId"] == str(sub_category.id)
        assert "categoryId" not in data
        assert data["subCategory"]["name"] == "Pasta"

    def test_supplied_total_is_ignored(self, client: TestClient, sub_category):
        data = _create(client, subCategoryId=str(sub_category.id), totalAmount=1.00)
        assert data["totalAmount"] == 16.99

    def test_discount_defaults_to_zero(self, client: TestClient, taxed_category):
        payload = {k: v for k, v in CARBONARA.items() if k != "discount"}
        resp = client.post(
            "/api/items", json={**payload, "categoryId": str(taxed_category.id)}
        )
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["discount"] == 0
        assert data["totalAmount"] == 18.99

    def test_item_tax_is_not_inherited(self, client: TestClient, sub_category):
        resp = client.post(
            "/api/items",
            json={
                **CARBONARA,
                "subCategoryId": str(sub_category.id),
                "tax": None,
                "taxType": None,
            },
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Tax amount and tax type are required when tax is applicable"
        )

    def test_tax_applicability_is_required(self, client: TestClient, sub_category):
        payload = {k: v for k, v in CARBONARA.items() if k != "taxApplicability"}
        resp = client.post(
            "/api/items", json={**payload, "subCategoryId": str(sub_category.id)}
        )
        assert resp.status_code == 400
        assert resp.json() == {
            "success": False,
            "message": "Tax applicability is required",
        }

    def test_null_tax_applicability_rejected(self, client: TestClient, sub_category):
        resp = client.post(
            "/api/items",
            json={
                **CARBONARA,
                "subCategoryId": str(sub_category.id),
                "taxApplicability": None,
            },
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Tax applicability is required"

    def test_discount_over_base_rejected(self, client: TestClient, sub_category):
        resp = client.post(
            "/api/items",
            json={
                **CARBONARA,
                "subCategoryId": str(sub_category.id),
                "baseAmount": 20,
                "discount": 50,
            },
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Discount cannot be greater than base amount"

    def test_negative_base_rejected(self, client: TestClient, sub_category):
        resp = client.post(
            "/api/items",
            json={**CARBONARA, "subCategoryId": str(sub_category.id), "baseAmount": -1},
        )
        assert resp.status_code == 400

    def test_sub_cent_discount_over_base_rejected(self, client: TestClient, taxed_category):
        resp = client.post(
            "/api/items",
            json={
                **CARBONARA,
                "categoryId": str(taxed_category.id),
                "baseAmount": 10.001,
                "discount": 10.004,
            },
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Discount cannot be greater than base amount"

    def test_amount_beyond_stored_range_rejected(self, client: TestClient, taxed_category):
        resp = client.post(
            "/api/items",
            json={**CARBONARA, "categoryId": str(taxed_category.id), "baseAmount": 1e13},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Base amount cannot exceed 9999999999.99"


class TestItemOwnership:
    def test_both_owners_rejected(self, client: TestClient, taxed_category, sub_category):
        resp = client.post(
            "/api/items",
            json={
                **CARBONARA,
                "categoryId": str(taxed_category.id),
                "subCategoryId": str(sub_category.id),
            },
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Item cannot belong to both category and subcategory simultaneously"
        )

    def test_no_owner_rejected(self, client: TestClient):
        resp = client.post("/api/items", json=CARBONARA)
        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Either category ID or subcategory ID must be provided"
        )

    def test_unknown_category_is_404(self, client: TestClient, missing_id):
        resp = client.post("/api/items", json={**CARBONARA, "categoryId": missing_id})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Category not found"

    def test_unknown_sub_category_is_404(self, client: TestClient, missing_id):
        resp = client.post("/api/items", json={**CARBONARA, "subCategoryId": missing_id})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Subcategory not found"

    def test_move_to_category_clears_sub_category(
        self, client: TestClient, item, untaxed_category
    ):
        resp = client.put(
            f"/api/items/{item.id}", json={"categoryId": str(untaxed_category.id)}
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["categoryId"] == str(untaxed_category.id)
        assert "subCategoryId" not in data

    def test_update_with_both_owners_rejected(
        self, client: TestClient, item, taxed_category, sub_category
    ):
        resp = client.put(
            f"/api/items/{item.id}",
            json={
                "categoryId": str(taxed_category.id),
                "subCategoryId": str(sub_category.id),
            },
        )
        assert resp.status_code == 400
        assert _stored(client, item.id)["subCategoryId"] == str(sub_category.id)

    def test_duplicate_name_within_owner(self, client: TestClient, item, sub_category):
        resp = client.post(
            "/api/items", json={**CARBONARA, "subCategoryId": str(sub_category.id)}
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == (
            "Item with this name already exists in this category/subcategory"
        )

    def test_same_name_under_other_owner_allowed(
        self, client: TestClient, item, taxed_category
    ):
        _create(client, categoryId=str(taxed_category.id))


class TestUpdateItem:
    def test_discount_change_rederives_total(self, client: TestClient, item):
        resp = client.put(f"/api/items/{item.id}", json={"discount": 3.00})
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Item updated successfully"
        assert body["data"]["baseAmount"] == 18.99
        assert body["data"]["totalAmount"] == 15.99

    def test_base_change_uses_stored_discount(self, client: TestClient, item):
        data = client.put(f"/api/items/{item.id}", json={"baseAmount": 25}).json()["data"]
        assert data["totalAmount"] == 23.0

    def test_discount_over_stored_base_leaves_item_unchanged(
        self, client: TestClient, sub_category
    ):
        created = _create(
            client, subCategoryId=str(sub_category.id), baseAmount=20, discount=0
        )
        resp = client.put(
            f"/api/items/{created['id']}", json={"discount": 50, "name": "Renamed"}
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Discount cannot be greater than base amount"

        stored = _stored(client, created["id"])
        assert stored["name"] == "Spaghetti Carbonara"
        assert stored["discount"] == 0
        assert stored["totalAmount"] == 20

    def test_supplied_total_is_ignored(self, client: TestClient, item):
        data = client.put(
            f"/api/items/{item.id}", json={"totalAmount": 99}
        ).json()["data"]
        assert data["totalAmount"] == 16.99

    def test_switch_tax_off(self, client: TestClient, item):
        data = client.put(
            f"/api/items/{item.id}", json={"taxApplicability": False}
        ).json()["data"]
        assert data["taxApplicability"] is False
        assert "tax" not in data and "taxType" not in data

    def test_repeat_update_is_idempotent(self, client: TestClient, item):
        patch = {"discount": 1.5, "description": "Classic Roman pasta"}
        first = client.put(f"/api/items/{item.id}", json=patch).json()["data"]
        second = client.put(f"/api/items/{item.id}", json=patch).json()["data"]
        for field in ("discount", "totalAmount", "description", "tax", "taxType"):
            assert first[field] == second[field]
        assert second["totalAmount"] == 17.49

    def test_null_name_rejected(self, client: TestClient, item):
        resp = client.put(f"/api/items/{item.id}", json={"name": None})
        assert resp.status_code == 400

    def test_update_unknown_item(self, client: TestClient, missing_id):
        resp = client.put(f"/api/items/{missing_id}", json={"discount": 1})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Item not found"


class TestReadItems:
    def test_list_all(self, client: TestClient, item):
        body = client.get("/api/items").json()
        assert body["count"] == 1
        assert body["data"][0]["name"] == "Spaghetti Carbonara"

    def test_list_by_sub_category(self, client: TestClient, item, sub_category):
        resp = client.get(f"/api/items/subcategory/{sub_category.id}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        assert body["subcategory"] == "Pasta"

    def test_list_by_category_excludes_sub_category_items(
        self, client: TestClient, item, taxed_category
    ):
        _create(client, categoryId=str(taxed_category.id), name="Steak Frites")
        body = client.get(f"/api/items/category/{taxed_category.id}").json()
        assert body["count"] == 1
        assert body["category"] == "Main Course"
        assert body["data"][0]["name"] == "Steak Frites"

    def test_list_by_unknown_sub_category(self, client: TestClient, missing_id):
        resp = client.get(f"/api/items/subcategory/{missing_id}")
        assert resp.status_code == 404

    def test_search_returns_all_matches(self, client: TestClient, item, taxed_category):
        _create(client, categoryId=str(taxed_category.id), name="Spaghetti Bolognese")
        resp = client.get("/api/items/search", params={"name": "spaghetti"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 2
        assert body["searchTerm"] == "spaghetti"

    def test_search_without_matches_is_empty_list(self, client: TestClient, item):
        body = client.get("/api/items/search", params={"name": "sushi"}).json()
        assert body["count"] == 0
        assert body["data"] == []

    def test_search_without_name_is_400(self, client: TestClient):
        resp = client.get("/api/items/search")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Item name is required for search"

    def test_malformed_id_is_404(self, client: TestClient):
        assert client.get("/api/items/12345").status_code == 404
