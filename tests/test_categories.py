import pytest


@pytest.fixture
def create_category(client, owner, account):
    def _create(**fields):
        body = {"account_id": account["id"], "name": "Food", "type": "expense", **fields}
        return client.post("/api/categories", json=body, headers=owner["headers"])
    return _create


class TestCategories:

    def test_create(self, create_category):
        response = create_category(color="#FF8800", icon="utensils")

        assert response.status_code == 201
        category = response.json()["category"]
        assert category["name"] == "Food"
        assert category["type"] == "expense"
        assert category["is_active"] is True
        assert category["parent_id"] is None

    def test_duplicate_name_and_type_conflicts(self, create_category):
        create_category()

        response = create_category()

        assert response.status_code == 409
        assert response.json()["message"] == "Duplicate record"

    def test_same_name_other_type_is_allowed(self, create_category):
        create_category()

        assert create_category(type="income").status_code == 201

    def test_subcategory(self, create_category):
        parent = create_category().json()["category"]

        response = create_category(name="Groceries", parent_id=parent["id"])

        assert response.status_code == 201
        assert response.json()["category"]["parent_id"] == parent["id"]

    def test_parent_from_other_account_rejected(self, client, owner, make_account, create_category):
        other_account = make_account(owner, name="Other")
        foreign_parent = client.post(
            "/api/categories",
            json={"account_id": other_account["id"], "name": "Bills", "type": "expense"},
            headers=owner["headers"],
        ).json()["category"]

        response = create_category(name="Water", parent_id=foreign_parent["id"])

        assert response.status_code == 400

    def test_list_filters_by_type(self, client, owner, create_category):
        create_category(name="Rent")
        create_category(name="Salary", type="income")

        response = client.get("/api/categories", params={"type": "income"}, headers=owner["headers"])

        assert [c["name"] for c in response.json()["categories"]] == ["Salary"]

    def test_inactive_hidden_unless_requested(self, client, owner, create_category):
        category = create_category().json()["category"]
        client.put(f"/api/categories/{category['id']}", json={"is_active": False}, headers=owner["headers"])

        assert client.get("/api/categories", headers=owner["headers"]).json()["categories"] == []
        response = client.get("/api/categories", params={"include_inactive": True}, headers=owner["headers"])
        assert len(response.json()["categories"]) == 1

    def test_invalid_color(self, create_category):
        response = create_category(color="orange")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body.color"


class TestCategoryDelete:

    def test_delete_unlinked(self, client, owner, create_category):
        category = create_category().json()["category"]

        response = client.delete(f"/api/categories/{category['id']}", headers=owner["headers"])

        assert response.status_code == 200
        assert client.get(f"/api/categories/{category['id']}", headers=owner["headers"]).status_code == 404

    def test_delete_with_transactions_is_refused(self, client, owner, account, create_category):
        category = create_category().json()["category"]
        transaction = client.post(
            "/api/transactions",
            json={
                "account_id": account["id"],
                "category_id": category["id"],
                "date": "2024-05-02",
                "description": "Market",
                "amount": "-80.00",
            },
            headers=owner["headers"],
        ).json()["transaction"]

        response = client.delete(f"/api/categories/{category['id']}", headers=owner["headers"])

        assert response.status_code == 400
        assert response.json()["message"] == "Category has linked transactions"
        assert client.get(f"/api/categories/{category['id']}", headers=owner["headers"]).status_code == 200
        assert client.get(f"/api/transactions/{transaction['id']}", headers=owner["headers"]).status_code == 200

    def test_delete_parent_is_refused(self, client, owner, create_category):
        parent = create_category().json()["category"]
        child = create_category(name="Groceries", parent_id=parent["id"]).json()["category"]

        response = client.delete(f"/api/categories/{parent['id']}", headers=owner["headers"])

        assert response.status_code == 400
        assert response.json()["message"] == "Category has subcategories"
        fetched = client.get(f"/api/categories/{child['id']}", headers=owner["headers"]).json()
        assert fetched["category"]["parent_id"] == parent["id"]

    def test_delete_child_then_parent(self, client, owner, create_category):
        parent = create_category().json()["category"]
        child = create_category(name="Groceries", parent_id=parent["id"]).json()["category"]

        assert client.delete(f"/api/categories/{child['id']}", headers=owner["headers"]).status_code == 200
        assert client.delete(f"/api/categories/{parent['id']}", headers=owner["headers"]).status_code == 200

    def test_delete_with_budget_is_refused(self, client, owner, account, create_category):
        category = create_category().json()["category"]
        budget = client.post(
            "/api/budgets",
            json={
                "account_id": account["id"],
                "category_id": category["id"],
                "name": "Food budget",
                "amount": "500",
                "period": "monthly",
                "start_date": "2024-05-01",
            },
            headers=owner["headers"],
        )
        assert budget.status_code == 201, budget.text

        response = client.delete(f"/api/categories/{category['id']}", headers=owner["headers"])

        assert response.status_code == 400
        assert response.json()["message"] == "Category has linked budgets"
