"""Role checks shared by every ledger resource."""
import pytest

from src.db.core import MemberRole
from src.errors import ForbiddenError
from src.services.permissions import PERMISSIONS, Action, authorize


# resource path -> (create body without account_id, update body)
RESOURCES = {
    "categories": ({"name": "Food", "type": "expense"}, {"name": "Meals"}),
    "transactions": (
        {"date": "2024-05-01", "description": "Lunch", "amount": "-25.00"},
        {"description": "Dinner"},
    ),
    "budgets": (
        {"name": "Monthly", "amount": "500.00", "period": "monthly", "start_date": "2024-05-01"},
        {"amount": "600.00"},
    ),
    "goals": ({"name": "Trip", "target_amount": "3000.00"}, {"current_amount": "100.00"}),
    "investments": ({"name": "Index fund", "type": "fund"}, {"current_price": "10.00"}),
}

SINGULAR = {
    "categories": "category",
    "transactions": "transaction",
    "budgets": "budget",
    "goals": "goal",
    "investments": "investment",
}


class TestPermissionTable:

    def test_viewer_reads_only(self):
        assert PERMISSIONS[MemberRole.VIEWER] == {Action.READ}

    def test_editor_cannot_manage(self):
        assert Action.MANAGE not in PERMISSIONS[MemberRole.EDITOR]
        assert {Action.CREATE, Action.UPDATE, Action.DELETE} <= PERMISSIONS[MemberRole.EDITOR]

    def test_owner_can_do_everything(self):
        assert PERMISSIONS[MemberRole.OWNER] == set(Action)

    def test_authorize_raises_forbidden(self):
        with pytest.raises(ForbiddenError):
            authorize(MemberRole.VIEWER, Action.DELETE)

        authorize(MemberRole.EDITOR, Action.DELETE)


@pytest.fixture
def create_resource(client, owner, account):
    def _create(resource):
        body, _ = RESOURCES[resource]
        response = client.post(f"/api/{resource}", json={**body, "account_id": account["id"]}, headers=owner["headers"])
        assert response.status_code == 201, response.text
        return response.json()[SINGULAR[resource]]
    return _create


@pytest.mark.parametrize("resource", list(RESOURCES))
class TestResourceAccess:

    def test_owner_full_cycle(self, client, owner, create_resource, resource):
        created = create_resource(resource)
        _, update_body = RESOURCES[resource]
        url = f"/api/{resource}/{created['id']}"

        assert client.get(url, headers=owner["headers"]).status_code == 200
        assert client.put(url, json=update_body, headers=owner["headers"]).status_code == 200
        response = client.delete(url, headers=owner["headers"])
        assert response.status_code == 200
        assert list(response.json()) == ["message"]
        assert client.get(url, headers=owner["headers"]).status_code == 404

    def test_editor_can_write(self, client, owner, account, make_user, add_member, create_resource, resource):
        editor = make_user()
        add_member(owner, account, editor, "editor")
        body, update_body = RESOURCES[resource]

        response = client.post(f"/api/{resource}", json={**body, "account_id": account["id"]}, headers=editor["headers"])
        assert response.status_code == 201

        created = response.json()[SINGULAR[resource]]
        url = f"/api/{resource}/{created['id']}"
        assert client.put(url, json=update_body, headers=editor["headers"]).status_code == 200
        assert client.delete(url, headers=editor["headers"]).status_code == 200

    def test_viewer_is_read_only(self, client, owner, account, make_user, add_member, create_resource, resource):
        viewer = make_user()
        add_member(owner, account, viewer, "viewer")
        created = create_resource(resource)
        body, update_body = RESOURCES[resource]
        url = f"/api/{resource}/{created['id']}"

        assert client.get(url, headers=viewer["headers"]).status_code == 200
        assert client.get(f"/api/{resource}", headers=viewer["headers"]).json()[resource]

        response = client.post(f"/api/{resource}", json={**body, "account_id": account["id"]}, headers=viewer["headers"])
        assert response.status_code == 403
        assert response.json()["error"] == "ForbiddenError"
        assert client.put(url, json=update_body, headers=viewer["headers"]).status_code == 403
        assert client.delete(url, headers=viewer["headers"]).status_code == 403

        # Nothing changed
        assert client.get(url, headers=owner["headers"]).json()[SINGULAR[resource]] == created

    def test_non_member_sees_nothing(self, client, account, make_user, create_resource, resource):
        stranger = make_user()
        created = create_resource(resource)
        body, update_body = RESOURCES[resource]
        url = f"/api/{resource}/{created['id']}"

        assert client.get(url, headers=stranger["headers"]).status_code == 404
        assert client.put(url, json=update_body, headers=stranger["headers"]).status_code == 404
        assert client.delete(url, headers=stranger["headers"]).status_code == 404
        assert client.get(f"/api/{resource}", headers=stranger["headers"]).json()[resource] == []

        response = client.post(f"/api/{resource}", json={**body, "account_id": account["id"]}, headers=stranger["headers"])
        assert response.status_code == 404

    def test_requires_token(self, client, resource):
        assert client.get(f"/api/{resource}").status_code == 401


def test_not_found_hides_existence(client, owner, make_user, account):
    stranger = make_user()

    missing = client.get("/api/accounts/00000000-0000-0000-0000-000000000000", headers=stranger["headers"])
    foreign = client.get(f"/api/accounts/{account['id']}", headers=stranger["headers"])

    assert missing.status_code == foreign.status_code == 404
    assert missing.json()["message"] == foreign.json()["message"]
