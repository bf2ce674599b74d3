"""
Tests for activity and settlement endpoints.
"""
import pytest
from activitybook.domain.activity import Activity, Expense
from activitybook.services import activity_service


def create_activity(client, title="Dinner", participant_ids=(1, 2)):
    response = client.post(
        "/api/activities",
        json={"title": title, "participant_ids": list(participant_ids)}
    )
    assert response.status_code == 201
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_activity(client):
    """Test activity creation."""
    first = create_activity(client)
    second = create_activity(client, title="Lunch", participant_ids=())

    assert first["id"] == 0
    assert first["participant_ids"] == [1, 2]
    assert first["status"] == "Populated"
    assert second["id"] == 1
    assert second["status"] == "Empty"


def test_create_activity_requires_title(client):
    response = client.post("/api/activities", json={"title": "", "participant_ids": [1]})
    assert response.status_code == 422


def test_add_expenses_and_settle(client):
    """Test the settlement of a three-way trip."""
    activity = create_activity(client, title="Trip", participant_ids=(1, 2, 3))

    response = client.post(
        f"/api/activities/{activity['id']}/expenses",
        json={"expenses": [{"payer_id": 1, "amount": 30}, {"payer_id": 2, "amount": 30}]}
    )
    assert response.status_code == 201
    assert response.json()["total_spent"] == pytest.approx(60.0)

    response = client.get(f"/api/activities/{activity['id']}/settlement")
    assert response.status_code == 200
    data = response.json()
    assert data["participant_count"] == 3
    assert data["net_balances"] == pytest.approx({"1": -10.0, "2": -10.0, "3": 20.0})
    assert [(t["from_participant_id"], t["to_participant_id"]) for t in data["transfers"]] == [(3, 1), (3, 2)]
    assert data["transfer_matrix"][2][0] == pytest.approx(-10.0)
    assert data["transfer_matrix"][0][2] == pytest.approx(10.0)


def test_add_expense_with_non_participant_payer(client):
    activity = create_activity(client)

    response = client.post(
        f"/api/activities/{activity['id']}/expenses",
        json={"expenses": [{"payer_id": 1, "amount": 10}, {"payer_id": 3, "amount": 10}]}
    )
    assert response.status_code == 400

    detail = client.get(f"/api/activities/{activity['id']}").json()
    assert detail["expenses"] == []


def test_add_expense_rejects_non_positive_amount(client):
    activity = create_activity(client)
    response = client.post(
        f"/api/activities/{activity['id']}/expenses",
        json={"expenses": [{"payer_id": 1, "amount": 0}]}
    )
    assert response.status_code == 422


def test_invite_late_joiner(client):
    activity = create_activity(client)
    client.post(
        f"/api/activities/{activity['id']}/expenses",
        json={"expenses": [{"payer_id": 1, "amount": 10}]}
    )

    response = client.post(
        f"/api/activities/{activity['id']}/participants",
        json={"participant_ids": [2, 3]}
    )
    assert response.status_code == 200
    assert response.json() == {"added": [3], "participant_ids": [1, 2, 3]}

    data = client.get(f"/api/activities/{activity['id']}/settlement").json()
    assert data["net_balances"]["3"] == 0.0
    assert data["transfers"] == [
        {"from_participant_id": 2, "to_participant_id": 1, "amount": pytest.approx(5.0)}
    ]


def test_delete_expenses(client):
    """Test soft deletion by position."""
    activity = create_activity(client)
    client.post(
        f"/api/activities/{activity['id']}/expenses",
        json={"expenses": [{"payer_id": 1, "amount": 10}, {"payer_id": 2, "amount": 4}]}
    )

    response = client.post(
        f"/api/activities/{activity['id']}/expenses/delete",
        json={"positions": [2, 9]}
    )
    assert response.status_code == 200
    assert response.json() == {"deleted": [2]}

    detail = client.get(f"/api/activities/{activity['id']}").json()
    assert [e["deleted"] for e in detail["expenses"]] == [False, True]
    assert detail["total_spent"] == pytest.approx(10.0)


def test_missing_activity(client):
    assert client.get("/api/activities/99").status_code == 404
    assert client.get("/api/activities/99/settlement").status_code == 404
    assert client.delete("/api/activities/99").status_code == 404


def test_list_delete_and_find_by_participant(client):
    lunch = create_activity(client, title="Lunch", participant_ids=(1, 2))
    create_activity(client, title="Dinner", participant_ids=(2, 3))

    assert [a["title"] for a in client.get("/api/activities").json()] == ["Lunch", "Dinner"]
    found = client.get("/api/activities/by-participant/3").json()
    assert [a["title"] for a in found] == ["Dinner"]

    assert client.delete(f"/api/activities/{lunch['id']}").status_code == 204
    assert [a["title"] for a in client.get("/api/activities").json()] == ["Dinner"]


@pytest.mark.parametrize("amount", ["inf", "-inf", "nan", 1e13])
def test_add_expense_rejects_non_finite_or_huge_amount(client, amount):
    activity = create_activity(client)
    response = client.post(
        f"/api/activities/{activity['id']}/expenses",
        json={"expenses": [{"payer_id": 1, "amount": amount}]}
    )
    assert response.status_code == 422

    detail = client.get(f"/api/activities/{activity['id']}").json()
    assert detail["expenses"] == []


def test_create_does_not_overwrite_stored_activity(client, db_session):
    """Creating with a key that is already stored conflicts instead of replacing it."""
    stored = Activity("Stored", 1, 2, primary_key=0)
    stored.add_expense(Expense(1, 10.0))
    activity_service.save_activity(stored, db_session)

    response = client.post("/api/activities", json={"title": "New", "participant_ids": []})
    assert response.status_code == 409

    detail = client.get("/api/activities/0").json()
    assert detail["title"] == "Stored"
    assert detail["participant_ids"] == [1, 2]
    assert len(detail["expenses"]) == 1
