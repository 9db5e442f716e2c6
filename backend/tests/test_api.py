"""
HTTP tests for the events, applications, chat, users and dashboard routes.
"""

from datetime import timedelta
from uuid import UUID, uuid4

from sqlmodel import select

from app.models import (
    ROLE_EVENT_MANAGER,
    STATUS_ACCEPTED,
    STATUS_PENDING,
    Application,
    ChatGroup,
    EventTeamMember,
)
from app.models.types import utcnow


def _event_payload(**overrides):
    payload = {
        "title": "Beach Cleanup",
        "description": "Pick up litter along the shore",
        "date": (utcnow() + timedelta(days=1)).isoformat(),
        "location": "North Beach",
    }
    payload.update(overrides)
    return payload


def _create_event(client, auth, manager, **overrides):
    response = client.post("/api/events/", json=_event_payload(**overrides), headers=auth(manager))
    assert response.status_code == 201, response.text
    return response.json()["event"]


def _apply(client, auth, volunteer, event_id):
    return client.post(f"/api/events/{event_id}/apply", headers=auth(volunteer))


def _accept(client, auth, manager, volunteer, event_id):
    response = _apply(client, auth, volunteer, event_id)
    application_id = response.json()["event"]["applicants"][-1]["_id"]
    return client.put(
        f"/api/events/{event_id}/applications/{application_id}",
        json={"status": "accepted"},
        headers=auth(manager),
    )


def _past_application(session, event, user, status=STATUS_PENDING):
    # Applying through the API is refused once the event has started
    session.add(Application(event_id=event.id, user_id=user.id, status=status))
    session.commit()


class TestAuth:
    def test_missing_token(self, client):
        assert client.get("/api/events/").status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/events/", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_health_is_public(self, client):
        assert client.get("/api/health/").json()["status"] == "ok"


class TestEvents:
    def test_create_seeds_team_and_chat(self, client, session, auth, manager):
        event = _create_event(client, auth, manager)
        event_id = UUID(event["id"])

        assert event["title"] == "Beach Cleanup"
        assert event["created_by"] == str(manager.id)
        team = session.exec(
            select(EventTeamMember.user_id).where(EventTeamMember.event_id == event_id)
        ).all()
        assert team == [manager.id]

        chat = client.get(f"/api/events/{event_id}/chat", headers=auth(manager)).json()
        assert chat["members"] == [str(manager.id)]
        assert chat["messages"][0]["text"] == 'Welcome to the "Beach Cleanup" chat!'

    def test_volunteer_cannot_create(self, client, auth, volunteer):
        response = client.post("/api/events/", json=_event_payload(), headers=auth(volunteer))
        assert response.status_code == 403

    def test_missing_fields_rejected(self, client, auth, manager):
        response = client.post(
            "/api/events/", json={"title": "No details"}, headers=auth(manager)
        )
        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)

    def test_list_scoped_by_role(self, client, auth, manager, volunteer, make_user):
        other_manager = make_user(ROLE_EVENT_MANAGER)
        mine = _create_event(client, auth, manager, title="Mine")
        _create_event(client, auth, other_manager, title="Theirs")
        _apply(client, auth, volunteer, mine["id"])

        managed = client.get("/api/events/", headers=auth(manager)).json()
        assert managed["total"] == 1
        assert [e["title"] for e in managed["items"]] == ["Mine"]

        seen = client.get("/api/events/", headers=auth(volunteer)).json()
        assert seen["total"] == 2
        flags = {e["title"]: e["has_applied"] for e in seen["items"]}
        assert flags == {"Mine": True, "Theirs": False}

    def test_list_filters_by_day(self, client, auth, manager):
        target = utcnow() + timedelta(days=3)
        _create_event(client, auth, manager, title="On day", date=target.isoformat())
        _create_event(
            client, auth, manager, title="Other day",
            date=(target + timedelta(days=2)).isoformat(),
        )

        response = client.get(
            "/api/events/",
            params={"date": target.date().isoformat()},
            headers=auth(manager),
        )
        assert [e["title"] for e in response.json()["items"]] == ["On day"]

    def test_created_list(self, client, auth, manager):
        event = _create_event(client, auth, manager)
        response = client.get("/api/events/created", headers=auth(manager))
        assert response.json() == [{"_id": event["id"], "title": "Beach Cleanup"}]

    def test_detail(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _apply(client, auth, volunteer, event["id"])

        detail = client.get(f"/api/events/{event['id']}", headers=auth(volunteer)).json()
        assert detail["has_applied"] is True
        assert detail["applicants"][0]["user_id"] == str(volunteer.id)
        assert detail["team_member_ids"] == [str(manager.id)]

    def test_detail_bad_ids(self, client, auth, manager):
        assert client.get("/api/events/not-a-uuid", headers=auth(manager)).status_code == 400
        assert client.get(f"/api/events/{uuid4()}", headers=auth(manager)).status_code == 404

    def test_update_creator_only(self, client, auth, manager, make_user):
        event = _create_event(client, auth, manager)
        outsider = make_user(ROLE_EVENT_MANAGER)

        response = client.put(
            f"/api/events/{event['id']}", json={"location": "South Pier"}, headers=auth(outsider)
        )
        assert response.status_code == 403

        response = client.put(
            f"/api/events/{event['id']}", json={"location": "South Pier"}, headers=auth(manager)
        )
        assert response.status_code == 200
        assert response.json()["event"]["location"] == "South Pier"
        assert response.json()["event"]["title"] == "Beach Cleanup"

    def test_delete_removes_chat(self, client, session, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _accept(client, auth, manager, volunteer, event["id"])

        response = client.delete(f"/api/events/{event['id']}", headers=auth(manager))
        assert response.json() == {"message": "Event deleted successfully"}
        assert session.exec(select(ChatGroup)).all() == []
        assert client.get(f"/api/events/{event['id']}", headers=auth(manager)).status_code == 404

    def test_volunteer_events(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _create_event(client, auth, manager, title="Not joined")
        _accept(client, auth, manager, volunteer, event["id"])

        response = client.get("/api/events/volunteer", headers=auth(volunteer))
        assert [e["title"] for e in response.json()] == ["Beach Cleanup"]


class TestApplications:
    def test_apply(self, client, auth, notifier, manager, volunteer):
        event = _create_event(client, auth, manager)

        response = _apply(client, auth, volunteer, event["id"])

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Application submitted successfully"
        assert body["event"]["_id"] == event["id"]
        assert body["event"]["title"] == "Beach Cleanup"
        applicant = body["event"]["applicants"][0]
        assert applicant["user_id"] == str(volunteer.id)
        assert applicant["status"] == "pending"
        assert "_id" in applicant
        assert notifier.sent[0][0] == manager.id

    def test_apply_twice_conflicts(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _apply(client, auth, volunteer, event["id"])

        response = _apply(client, auth, volunteer, event["id"])
        assert response.status_code == 409
        assert response.json() == {"detail": "You have already applied for this event"}

    def test_apply_past_event(self, client, auth, manager, volunteer, make_event):
        event = make_event(manager, days_ahead=-2)
        response = _apply(client, auth, volunteer, event.id)
        assert response.status_code == 409

    def test_manager_cannot_apply(self, client, auth, manager):
        event = _create_event(client, auth, manager)
        assert _apply(client, auth, manager, event["id"]).status_code == 403

    def test_update_status(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)

        response = _accept(client, auth, manager, volunteer, event["id"])

        assert response.status_code == 200
        assert response.json() == {
            "message": "Application accepted successfully updated",
            "status": "accepted",
        }
        chat = client.get(f"/api/events/{event['id']}/chat", headers=auth(volunteer)).json()
        assert set(chat["members"]) == {str(manager.id), str(volunteer.id)}

    def test_update_status_rejects_unknown_value(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        application_id = _apply(client, auth, volunteer, event["id"]).json()["event"]["applicants"][0]["_id"]

        response = client.put(
            f"/api/events/{event['id']}/applications/{application_id}",
            json={"status": "approved"},
            headers=auth(manager),
        )
        assert response.status_code == 400

    def test_event_applications(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _apply(client, auth, volunteer, event["id"])

        response = client.get(f"/api/events/{event['id']}/applications", headers=auth(manager))
        applicant = response.json()["applicants"][0]
        assert applicant["user_name"] == volunteer.name
        assert applicant["user_email"] == volunteer.email

        response = client.get(f"/api/events/{event['id']}/applications", headers=auth(volunteer))
        assert response.status_code == 403

    def test_my_applications(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _apply(client, auth, volunteer, event["id"])

        response = client.get("/api/events/my-applications", headers=auth(volunteer))
        assert response.status_code == 200
        row = response.json()[0]
        assert row["event_id"] == event["id"]
        assert row["event_title"] == "Beach Cleanup"
        assert row["event_manager"] == manager.name
        assert row["status"] == "pending"

    def test_volunteers_and_complete(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _accept(client, auth, manager, volunteer, event["id"])

        response = client.get(f"/api/events/{event['id']}/volunteers", headers=auth(manager))
        assert response.json() == {
            "volunteers": [
                {
                    "_id": str(volunteer.id),
                    "name": volunteer.name,
                    "email": volunteer.email,
                    "completed": False,
                    "rating": None,
                }
            ]
        }

        url = f"/api/events/{event['id']}/volunteers/{volunteer.id}/complete"
        response = client.post(url, json={"completed": True, "rating": 5}, headers=auth(manager))
        assert response.status_code == 200
        assert response.json() == {
            "message": "Volunteer status updated successfully",
            "volunteer": {"_id": str(volunteer.id), "completed": True, "rating": 5},
        }

        response = client.post(url, json={"completed": True, "rating": 4}, headers=auth(manager))
        assert response.status_code == 409

        ratings = client.get(f"/api/users/{volunteer.id}/ratings", headers=auth(manager)).json()
        assert ratings["average_rating"] == 5.0
        assert ratings["total_ratings"] == 1
        assert ratings["reviews"][0]["event_manager_id"] == str(manager.id)

    def test_complete_rating_out_of_range(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _accept(client, auth, manager, volunteer, event["id"])

        response = client.post(
            f"/api/events/{event['id']}/volunteers/{volunteer.id}/complete",
            json={"rating": 9},
            headers=auth(manager),
        )
        assert response.status_code == 400


class TestChat:
    def test_non_member_forbidden(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        response = client.get(f"/api/events/{event['id']}/chat", headers=auth(volunteer))
        assert response.status_code == 403

    def test_post_pushes_to_other_members(self, client, auth, publisher, manager, volunteer):
        event = _create_event(client, auth, manager)
        _accept(client, auth, manager, volunteer, event["id"])

        response = client.post(
            f"/api/events/{event['id']}/chat/messages",
            json={"text": "Bring gloves"},
            headers=auth(manager),
        )

        assert response.status_code == 201
        assert response.json()["text"] == "Bring gloves"
        pushed = [(c, e) for c, e, _ in publisher.published]
        assert pushed == [(f"user:{volunteer.id}", "receiveMessage")]

        chat = client.get(f"/api/events/{event['id']}/chat", headers=auth(volunteer)).json()
        assert [m["text"] for m in chat["messages"]][-1] == "Bring gloves"


class TestUsers:
    def test_me(self, client, auth, volunteer):
        response = client.get("/api/users/me", headers=auth(volunteer))
        assert response.json()["email"] == volunteer.email
        assert response.json()["total_ratings"] == 0

    def test_ratings_missing_user(self, client, auth, volunteer):
        response = client.get(f"/api/users/{uuid4()}/ratings", headers=auth(volunteer))
        assert response.status_code == 404

    def test_volunteer_profile_stats(self, client, session, auth, manager, volunteer, make_event):
        upcoming = make_event(manager, title="Upcoming")
        past = make_event(manager, title="Past", days_ahead=-2)
        make_event(manager, title="Not applied")
        _apply(client, auth, volunteer, upcoming.id)
        _past_application(session, past, volunteer, status=STATUS_ACCEPTED)

        response = client.get(
            f"/api/users/{volunteer.id}/volunteer-profile", headers=auth(manager)
        )
        assert response.status_code == 200
        profile = response.json()
        assert profile["_id"] == str(volunteer.id)
        assert profile["name"] == volunteer.name
        assert profile["role"] == "volunteer"
        assert profile["events_participated"] == {"total": 2, "completed": 1, "ongoing": 1}
        assert profile["ratings"]["total_ratings"] == 0
        assert profile["ratings"]["reviews"] == []

    def test_volunteer_profile_includes_ratings(self, client, auth, manager, volunteer):
        event = _create_event(client, auth, manager)
        _accept(client, auth, manager, volunteer, event["id"])
        client.post(
            f"/api/events/{event['id']}/volunteers/{volunteer.id}/complete",
            json={"completed": True, "rating": 4},
            headers=auth(manager),
        )

        profile = client.get(
            f"/api/users/{volunteer.id}/volunteer-profile", headers=auth(volunteer)
        ).json()
        assert profile["ratings"]["average_rating"] == 4.0
        assert [r["rating"] for r in profile["ratings"]["reviews"]] == [4]
        assert profile["events_participated"]["ongoing"] == 1

    def test_volunteer_profile_of_manager_rejected(self, client, auth, manager, volunteer):
        response = client.get(
            f"/api/users/{manager.id}/volunteer-profile", headers=auth(volunteer)
        )
        assert response.status_code == 400
        assert "not a volunteer" in response.json()["detail"]

    def test_volunteer_profile_missing_user(self, client, auth, volunteer):
        response = client.get(
            f"/api/users/{uuid4()}/volunteer-profile", headers=auth(volunteer)
        )
        assert response.status_code == 404
        bad = client.get("/api/users/nope/volunteer-profile", headers=auth(volunteer))
        assert bad.status_code == 400


class TestDashboard:
    def test_volunteer_counts(self, client, session, auth, manager, volunteer, make_event):
        later = make_event(manager, title="Later", days_ahead=5)
        sooner = make_event(manager, title="Sooner", days_ahead=2)
        past = make_event(manager, title="Past", days_ahead=-3)
        make_event(manager, title="Not applied")
        _apply(client, auth, volunteer, later.id)
        _apply(client, auth, volunteer, sooner.id)
        _past_application(session, past, volunteer)

        response = client.get("/api/dashboard/", headers=auth(volunteer))
        assert response.status_code == 200
        data = response.json()
        assert data["events_count"] == 3
        assert [e["title"] for e in data["upcoming_events"]] == ["Sooner", "Later"]
        assert set(data["upcoming_events"][0]) == {"_id", "title", "date", "location"}
        assert data["upcoming_events"][0]["_id"] == str(sooner.id)
        assert "pending_applications" not in data

    def test_manager_counts(self, client, auth, manager, volunteer, make_user):
        first = _create_event(client, auth, manager, title="First")
        second = _create_event(client, auth, manager, title="Second")
        _create_event(client, auth, make_user(ROLE_EVENT_MANAGER), title="Someone else's")
        other_volunteer = make_user()

        _apply(client, auth, volunteer, first["id"])
        _apply(client, auth, other_volunteer, second["id"])
        _accept(client, auth, manager, make_user(), second["id"])

        data = client.get("/api/dashboard/", headers=auth(manager)).json()
        assert data == {"events_count": 2, "pending_applications": 2}

    def test_empty_dashboards(self, client, auth, manager, volunteer):
        assert client.get("/api/dashboard/", headers=auth(volunteer)).json() == {
            "events_count": 0,
            "upcoming_events": [],
        }
        assert client.get("/api/dashboard/", headers=auth(manager)).json() == {
            "events_count": 0,
            "pending_applications": 0,
        }

    def test_requires_token(self, client):
        assert client.get("/api/dashboard/").status_code == 401


def test_beach_cleanup_over_http(client, auth, manager, volunteer):
    event = _create_event(client, auth, manager, title="Beach Cleanup")
    assert _accept(client, auth, manager, volunteer, event["id"]).status_code == 200

    chat = client.get(f"/api/events/{event['id']}/chat", headers=auth(manager)).json()
    assert set(chat["members"]) == {str(manager.id), str(volunteer.id)}

    response = client.post(
        f"/api/events/{event['id']}/volunteers/{volunteer.id}/complete",
        json={"completed": True, "rating": 5},
        headers=auth(manager),
    )
    assert response.json()["volunteer"]["completed"] is True

    me = client.get("/api/users/me", headers=auth(volunteer)).json()
    assert me["average_rating"] == 5.0
