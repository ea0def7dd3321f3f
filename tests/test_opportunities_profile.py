# tests/test_opportunities_profile.py
import pytest

from agenthub.db import Opportunity


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}


def test_staff_create_and_update_opportunity(client, staff_headers):
    r = client.post(
        "/opportunities",
        json={"name": "ShopEasy Customer Care", "client": "ShopEasy", "tags": ["E-commerce"]},
        headers=staff_headers,
    )
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["status"] == "draft"
    assert created["maxAgents"] == 50
    assert created["currentAgents"] == 0

    r = client.put(f"/opportunities/{created['id']}", json={"status": "active"}, headers=staff_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "active"
    assert r.json()["name"] == "ShopEasy Customer Care"


def test_create_requires_staff(client, agent_headers):
    r = client.post("/opportunities", json={"name": "X", "client": "Y"}, headers=agent_headers)
    assert r.status_code == 403


def test_agents_only_see_active_opportunities(db, client, agent_headers, staff_headers, opportunity):
    db.add(Opportunity(name="Draft one", client="Hidden", status="draft"))
    db.commit()

    agent_view = client.get("/opportunities", headers=agent_headers).json()["opportunities"]
    staff_view = client.get("/opportunities", headers=staff_headers).json()["opportunities"]

    assert [o["name"] for o in agent_view] == [opportunity.name]
    assert len(staff_view) == 2


def test_get_opportunity_includes_ordered_questions(client, staff_headers, opportunity):
    for text in ("First", "Second"):
        client.post(f"/opportunities/{opportunity.id}/questions", json={"question": text}, headers=staff_headers)

    r = client.get(f"/opportunities/{opportunity.id}", headers=staff_headers)
    assert r.status_code == 200
    assert [q["question"] for q in r.json()["questions"]] == ["First", "Second"]


def test_delete_closes_instead_of_removing(db, client, staff_headers, opportunity):
    r = client.delete(f"/opportunities/{opportunity.id}", headers=staff_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "closed"

    db.expire_all()
    assert db.get(Opportunity, opportunity.id).status == "closed"


def test_invalid_opportunity_status_is_rejected(client, staff_headers, opportunity):
    r = client.put(f"/opportunities/{opportunity.id}", json={"status": "archived"}, headers=staff_headers)
    assert r.status_code == 422


def test_get_profile_includes_agent_record(client, agent, agent_headers):
    r = client.get("/profile", headers=agent_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["firstName"] == "Maria"
    assert body["agent"]["id"] == agent.id


def test_staff_profile_has_no_agent(client, staff_headers):
    assert client.get("/profile", headers=staff_headers).json()["agent"] is None


def test_update_profile_partial_and_blank_clears(client, agent_headers):
    client.put("/profile", json={"phone": "+1 555 0100", "middleName": "Luz"}, headers=agent_headers)

    r = client.put("/profile", json={"middleName": "  ", "dateOfBirth": "1990-04-12"}, headers=agent_headers)

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["middleName"] is None
    assert body["phone"] == "+1 555 0100"
    assert body["dateOfBirth"] == "1990-04-12"


def test_update_profile_requires_a_field(client, agent_headers):
    r = client.put("/profile", json={}, headers=agent_headers)
    assert r.status_code == 422


def test_taken_username_is_rejected(client, staff, agent_headers):
    r = client.put("/profile", json={"username": "ADMIN"}, headers=agent_headers)
    assert r.status_code == 422
    assert "taken" in r.json()["detail"]


def test_lookup_username_is_case_insensitive(client, agent):
    r = client.post("/lookup-username", json={"username": "MARIA"})
    assert r.status_code == 200
    assert r.json() == {"email": "maria@example.com"}


def test_lookup_unknown_username(client):
    r = client.post("/lookup-username", json={"username": "nobody"})
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"


@pytest.mark.parametrize("field", ["tags", "description", "maxAgents", "currentAgents", "openPositions"])
def test_update_cannot_null_required_columns(client, staff_headers, opportunity, field):
    r = client.put(f"/opportunities/{opportunity.id}", json={field: None}, headers=staff_headers)

    assert r.status_code == 422
    assert r.json()["error"] == "validation_failed"

    after = client.get(f"/opportunities/{opportunity.id}", headers=staff_headers)
    assert after.status_code == 200
    assert after.json()["tags"] == []
