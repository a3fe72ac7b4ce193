from decimal import Decimal

import pytest


@pytest.fixture
def create_transaction(client, owner, account):
    def _create(**fields):
        body = {
            "account_id": account["id"],
            "date": "2024-05-10",
            "description": "Salary",
            "amount": "100.00",
            **fields,
        }
        response = client.post("/api/transactions", json=body, headers=owner["headers"])
        assert response.status_code == 201, response.text
        return response.json()["transaction"]
    return _create


def balance(client, owner, account):
    response = client.get(f"/api/accounts/{account['id']}", headers=owner["headers"])
    return Decimal(response.json()["account"]["current_balance"])


class TestTransactionType:

    @pytest.mark.parametrize("amount, expected_type", [
        ("150.00", "income"),
        ("-20.00", "expense"),
    ])
    def test_type_follows_sign_and_is_stored(self, client, owner, create_transaction, amount, expected_type):
        created = create_transaction(amount=amount)

        fetched = client.get(f"/api/transactions/{created['id']}", headers=owner["headers"])

        assert created["type"] == expected_type
        assert fetched.status_code == 200
        assert fetched.json()["transaction"]["type"] == expected_type
        assert Decimal(fetched.json()["transaction"]["amount"]) == Decimal(amount)

    def test_amount_rounded_to_cents(self, create_transaction):
        assert Decimal(create_transaction(amount="-19.994")["amount"]) == Decimal("-19.99")

    def test_zero_is_income(self, create_transaction):
        assert create_transaction(amount="0")["type"] == "income"

    def test_client_type_is_ignored(self, create_transaction):
        assert create_transaction(amount="-5", type="income")["type"] == "expense"

    def test_amount_update_rederives_type(self, client, owner, create_transaction):
        transaction = create_transaction(amount="100.00")

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"amount": -50}, headers=owner["headers"]
        )

        assert response.status_code == 200
        updated = response.json()["transaction"]
        assert updated["type"] == "expense"
        assert Decimal(updated["amount"]) == Decimal("-50.00")

        fetched = client.get(f"/api/transactions/{transaction['id']}", headers=owner["headers"]).json()
        assert fetched["transaction"]["type"] == "expense"

    def test_other_updates_keep_type(self, client, owner, create_transaction):
        transaction = create_transaction(amount="-10.00")

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"description": "Taxi"}, headers=owner["headers"]
        )

        assert response.json()["transaction"]["type"] == "expense"
        assert response.json()["transaction"]["description"] == "Taxi"


class TestTransactionUpdate:

    def test_empty_body(self, client, owner, create_transaction):
        transaction = create_transaction()

        response = client.put(f"/api/transactions/{transaction['id']}", json={}, headers=owner["headers"])

        assert response.status_code == 400
        assert response.json()["message"] == "No fields to update"

    def test_only_unknown_fields(self, client, owner, create_transaction):
        transaction = create_transaction()

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"created_by": "someone"}, headers=owner["headers"]
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No fields to update"

    def test_null_amount_rejected(self, client, owner, create_transaction):
        transaction = create_transaction()

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"amount": None}, headers=owner["headers"]
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body.amount"

    def test_category_can_be_cleared(self, client, owner, account, create_transaction):
        category = client.post(
            "/api/categories",
            json={"account_id": account["id"], "name": "Job", "type": "income"},
            headers=owner["headers"],
        ).json()["category"]
        transaction = create_transaction(category_id=category["id"])
        assert transaction["category"]["name"] == "Job"

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"category_id": None}, headers=owner["headers"]
        )

        assert response.status_code == 200
        assert response.json()["transaction"]["category_id"] is None
        assert response.json()["transaction"]["category"] is None

    def test_category_from_other_account_rejected(self, client, owner, make_account, create_transaction):
        other = make_account(owner, name="Other")
        foreign = client.post(
            "/api/categories",
            json={"account_id": other["id"], "name": "Misc", "type": "expense"},
            headers=owner["headers"],
        ).json()["category"]
        transaction = create_transaction()

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"category_id": foreign["id"]}, headers=owner["headers"]
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Category does not belong to this account"


class TestRunningBalance:

    def test_balance_follows_transactions(self, client, owner, account, create_transaction):
        assert balance(client, owner, account) == Decimal("1000.00")

        income = create_transaction(amount="250.00")
        expense = create_transaction(amount="-100.50", description="Groceries")
        assert balance(client, owner, account) == Decimal("1149.50")

        client.put(f"/api/transactions/{expense['id']}", json={"amount": "-150.50"}, headers=owner["headers"])
        assert balance(client, owner, account) == Decimal("1099.50")

        client.delete(f"/api/transactions/{income['id']}", headers=owner["headers"])
        assert balance(client, owner, account) == Decimal("849.50")


class TestAmountBounds:

    @pytest.mark.parametrize("amount", ["1e30", "12345678901234.00", "-12345678901234", "9999999999999.999"])
    def test_amount_beyond_column_precision(self, client, owner, account, amount):
        response = client.post(
            "/api/transactions",
            json={"account_id": account["id"], "date": "2024-05-10", "description": "Huge", "amount": amount},
            headers=owner["headers"],
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body.amount"
        assert balance(client, owner, account) == Decimal("1000.00")

    def test_largest_amount_accepted(self, owner, make_account, create_transaction):
        empty = make_account(owner, name="Empty")
        transaction = create_transaction(account_id=empty["id"], amount="9999999999999.99")

        assert Decimal(transaction["amount"]) == Decimal("9999999999999.99")

    def test_update_beyond_precision(self, client, owner, create_transaction):
        transaction = create_transaction()

        response = client.put(
            f"/api/transactions/{transaction['id']}", json={"amount": "1e30"}, headers=owner["headers"]
        )

        assert response.status_code == 400



class TestTransactionListing:

    def test_newest_first(self, client, owner, create_transaction):
        create_transaction(date="2024-01-01", description="Old")
        create_transaction(date="2024-03-01", description="New")

        response = client.get("/api/transactions", headers=owner["headers"])

        assert [t["description"] for t in response.json()["transactions"]] == ["New", "Old"]

    def test_date_range(self, client, owner, create_transaction):
        create_transaction(date="2024-01-15", description="January")
        create_transaction(date="2024-02-15", description="February")
        create_transaction(date="2024-03-15", description="March")

        response = client.get(
            "/api/transactions",
            params={"start_date": "2024-02-01", "end_date": "2024-02-29"},
            headers=owner["headers"],
        )

        assert [t["description"] for t in response.json()["transactions"]] == ["February"]

    def test_pagination(self, client, owner, create_transaction):
        for day in range(1, 6):
            create_transaction(date=f"2024-04-0{day}", description=f"Day {day}")

        response = client.get("/api/transactions", params={"skip": 1, "limit": 2}, headers=owner["headers"])

        assert [t["description"] for t in response.json()["transactions"]] == ["Day 4", "Day 3"]

    def test_filter_by_account(self, client, owner, make_account, create_transaction):
        other = make_account(owner, name="Other")
        create_transaction(description="Main")
        create_transaction(account_id=other["id"], description="Side")

        response = client.get("/api/transactions", params={"account_id": other["id"]}, headers=owner["headers"])

        assert [t["description"] for t in response.json()["transactions"]] == ["Side"]

    @pytest.mark.parametrize("params, field", [
        ({"limit": 0}, "query.limit"),
        ({"limit": 501}, "query.limit"),
        ({"skip": -1}, "query.skip"),
        ({"start_date": "yesterday"}, "query.start_date"),
        ({"account_id": "not-a-uuid"}, "query.account_id"),
    ])
    def test_invalid_query(self, client, owner, params, field):
        response = client.get("/api/transactions", params=params, headers=owner["headers"])

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field

    def test_invalid_path_id(self, client, owner):
        response = client.get("/api/transactions/123", headers=owner["headers"])

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "path.transaction_id"

    def test_missing_required_fields(self, client, owner, account):
        response = client.post("/api/transactions", json={"account_id": account["id"]}, headers=owner["headers"])

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"body.date", "body.description", "body.amount"} <= fields
