# tests/test_applications.py
import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from agenthub.db import Application, ApplicationAnswer, ApplicationQuestion, EmailLog, Message, Notification
from agenthub.errors import DuplicateApplication, NotFound, StorageFailure
from agenthub.services import applications as service
from tests.conftest import RecordingSender, make_agent


@pytest.fixture
def two_questions(db, opportunity):
    questions = [
        ApplicationQuestion(opportunity_id=opportunity.id, question="Why us?", type="textarea", required=True, order=1),
        ApplicationQuestion(
            opportunity_id=opportunity.id,
            question="Weekends?",
            type="radio",
            required=True,
            order=2,
            options=[{"value": "yes", "label": "Yes", "labelEs": "Sí"}, {"value": "no", "label": "No", "labelEs": "No"}],
        ),
    ]
    db.add_all(questions)
    db.commit()
    return [q.id for q in questions]


def _submit(client, headers, opportunity_id, answers):
    return client.post(
        "/applications",
        json={"opportunityId": opportunity_id, "answers": answers},
        headers=headers,
    )


def test_missing_second_required_answer_is_rejected(client, agent_headers, opportunity, two_questions, confirmation_sender):
    first, second = two_questions

    r = _submit(client, agent_headers, opportunity.id, [{"questionId": first, "value": "I like support work"}])

    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "validation_failed"
    assert body["questionId"] == second
    assert second in body["detail"]
    assert confirmation_sender.calls == []


def test_all_required_answers_creates_pending_application(
    db, client, agent, agent_headers, opportunity, two_questions, confirmation_sender
):
    first, second = two_questions

    r = _submit(
        client,
        agent_headers,
        opportunity.id,
        [{"questionId": first, "value": "I like support work"}, {"questionId": second, "value": "yes"}],
    )

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["status"] == "pending"
    assert body["agentId"] == agent.id
    assert body["confirmationEmailSent"] is True
    assert [a["kind"] for a in body["answers"]] == ["text", "choice"]
    assert body["answers"][1]["value"] == "yes"
    assert body["answers"][1]["question"]["id"] == second
    assert body["agent"]["user"]["email"] == "maria@example.com"
    assert len(confirmation_sender.calls) == 1
    assert confirmation_sender.calls[0]["opportunity_name"] == opportunity.name

    db.expire_all()
    assert db.query(Notification).filter(Notification.agent_id == agent.id).count() == 1
    message = db.query(Message).filter(Message.agent_id == agent.id).one()
    assert message.type == "email"


def test_second_submission_is_duplicate(db, client, agent, agent_headers, opportunity, confirmation_sender):
    first = _submit(client, agent_headers, opportunity.id, [])
    assert first.status_code == 201

    second = _submit(client, agent_headers, opportunity.id, [])
    assert second.status_code == 409
    assert second.json()["error"] == "duplicate_application"

    db.expire_all()
    apps = db.query(Application).all()
    assert len(apps) == 1
    assert apps[0].id == first.json()["id"]
    assert apps[0].status == "pending"


def test_failing_confirmation_still_creates_application(db, client, agent, agent_headers, opportunity, confirmation_sender):
    confirmation_sender.error = RuntimeError("provider down")

    r = _submit(client, agent_headers, opportunity.id, [])

    assert r.status_code == 201, r.text
    assert r.json()["confirmationEmailSent"] is False
    db.expire_all()
    assert db.query(Application).count() == 1
    assert db.query(Notification).count() == 1


def test_unsent_confirmation_leaves_flag_false(client, agent_headers, opportunity, confirmation_sender):
    confirmation_sender.result = False
    r = _submit(client, agent_headers, opportunity.id, [])
    assert r.status_code == 201
    assert r.json()["confirmationEmailSent"] is False


def test_unknown_opportunity_is_not_found(client, agent_headers, confirmation_sender):
    r = _submit(client, agent_headers, "nope", [])
    assert r.status_code == 404


def test_staff_cannot_submit(client, staff_headers, opportunity, confirmation_sender):
    r = _submit(client, staff_headers, opportunity.id, [])
    assert r.status_code == 403


def test_cannot_apply_for_another_agent(db, client, agent_headers, opportunity, confirmation_sender):
    other = make_agent(db, email="other@example.com", username="other")
    r = client.post(
        "/applications",
        json={"opportunityId": opportunity.id, "agentId": other.id, "answers": []},
        headers=agent_headers,
    )
    assert r.status_code == 403


def test_agents_only_list_their_own(db, client, agent_headers, staff_headers, opportunity, confirmation_sender):
    other = make_agent(db, email="other@example.com", username="other")
    service.submit_application(db, other.id, opportunity.id, [], send_confirmation=RecordingSender())
    _submit(client, agent_headers, opportunity.id, [])

    mine = client.get("/applications", headers=agent_headers)
    assert mine.status_code == 200
    assert len(mine.json()["applications"]) == 1

    everyone = client.get("/applications", params={"opportunityId": opportunity.id}, headers=staff_headers)
    assert len(everyone.json()["applications"]) == 2

    filtered = client.get("/applications", params={"agentId": other.id}, headers=staff_headers)
    assert [a["agentId"] for a in filtered.json()["applications"]] == [other.id]


def test_agent_cannot_read_someone_elses_application(db, client, agent_headers, opportunity):
    other = make_agent(db, email="other@example.com", username="other")
    application = service.submit_application(db, other.id, opportunity.id, [], send_confirmation=RecordingSender())

    r = client.get(f"/applications/{application.id}", headers=agent_headers)
    assert r.status_code == 404


def test_status_update_notifies_agent(db, client, agent, agent_headers, staff, staff_headers, opportunity, status_sender):
    application = service.submit_application(db, agent.id, opportunity.id, [], send_confirmation=RecordingSender())

    r = client.put(
        f"/applications/{application.id}/status",
        json={"status": "accepted", "notes": "Strong fit"},
        headers=staff_headers,
    )

    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "accepted"
    assert body["reviewedBy"] == staff.id
    assert body["notes"] == "Strong fit"
    assert status_sender.calls[0]["old_status"] == "pending"
    assert status_sender.calls[0]["new_status"] == "accepted"

    notifications = client.get("/notifications", headers=agent_headers).json()["notifications"]
    assert any(n["title"] == "Application status updated" for n in notifications)


def test_same_status_is_a_no_op(db, agent, opportunity):
    application = service.submit_application(db, agent.id, opportunity.id, [], send_confirmation=RecordingSender())
    sender = RecordingSender()

    service.update_status(db, application.id, "pending", "reviewer", send_update=sender)

    assert sender.calls == []
    assert application.reviewed_at is None


def test_unknown_status_is_rejected(client, staff_headers, db, agent, opportunity, status_sender):
    application = service.submit_application(db, agent.id, opportunity.id, [], send_confirmation=RecordingSender())
    r = client.put(f"/applications/{application.id}/status", json={"status": "hired"}, headers=staff_headers)
    assert r.status_code == 422


def test_service_duplicate_has_no_side_effects(db, agent, opportunity):
    sender = RecordingSender()
    service.submit_application(db, agent.id, opportunity.id, [], send_confirmation=sender)

    with pytest.raises(DuplicateApplication):
        service.submit_application(db, agent.id, opportunity.id, [], send_confirmation=sender)

    assert len(sender.calls) == 1
    assert db.query(Notification).count() == 1


def test_service_unknown_agent_is_not_found(db, opportunity):
    with pytest.raises(NotFound):
        service.submit_application(db, "ghost", opportunity.id, [], send_confirmation=RecordingSender())


def test_real_dispatcher_logs_email_without_provider(db, agent, opportunity):
    application = service.submit_application(db, agent.id, opportunity.id, [])

    assert application.confirmation_email_sent is True
    log = db.query(EmailLog).one()
    assert log.template == "application_confirmation"
    assert log.status == "sent"
    assert log.to == "maria@example.com"


def test_concurrent_duplicate_caught_by_unique_constraint(db, agent, opportunity, monkeypatch):
    original = service.validate_answers

    def racing_validate(questions, answers):
        # Another request commits the same application after the duplicate check
        db.add(Application(agent_id=agent.id, opportunity_id=opportunity.id, status="pending"))
        db.commit()
        return original(questions, answers)

    monkeypatch.setattr(service, "validate_answers", racing_validate)
    sender = RecordingSender()

    with pytest.raises(DuplicateApplication):
        service.submit_application(db, agent.id, opportunity.id, [], send_confirmation=sender)

    assert sender.calls == []
    assert db.query(Application).count() == 1
    assert db.query(Notification).count() == 0


def test_storage_error_on_insert_commits_nothing(db, agent, opportunity, two_questions):
    first, second = two_questions
    sender = RecordingSender()

    def fail_flush(session, flush_context, instances):
        raise OperationalError("INSERT INTO applications", {}, Exception("disk I/O error"))

    event.listen(db, "before_flush", fail_flush)
    try:
        with pytest.raises(StorageFailure):
            service.submit_application(
                db,
                agent.id,
                opportunity.id,
                [{"question_id": first, "value": "I like support work"}, {"question_id": second, "value": "no"}],
                send_confirmation=sender,
            )
    finally:
        event.remove(db, "before_flush", fail_flush)

    assert sender.calls == []
    assert db.query(Application).count() == 0
    assert db.query(ApplicationAnswer).count() == 0


def test_nan_number_answer_is_rejected(db, client, agent_headers, opportunity, confirmation_sender):
    question = ApplicationQuestion(
        opportunity_id=opportunity.id,
        question="Hours per week?",
        type="number",
        required=True,
        order=1,
        validation={"min": 1, "max": 40},
    )
    db.add(question)
    db.commit()

    r = _submit(client, agent_headers, opportunity.id, [{"questionId": question.id, "value": "nan"}])

    assert r.status_code == 422
    assert r.json()["questionId"] == question.id
    db.expire_all()
    assert db.query(Application).count() == 0


def test_stored_broken_pattern_rejects_instead_of_crashing(db, client, agent_headers, opportunity, confirmation_sender):
    question = ApplicationQuestion(
        opportunity_id=opportunity.id,
        question="ZIP code",
        type="text",
        required=True,
        order=1,
        validation={"pattern": "(["},
    )
    db.add(question)
    db.commit()

    r = _submit(client, agent_headers, opportunity.id, [{"questionId": question.id, "value": "12345"}])

    assert r.status_code == 422
    assert r.json()["error"] == "validation_failed"
