"""End-to-end behaviour of the gate, pages, APIs and sign-out."""

import json
from base64 import b64decode

import pytest
from itsdangerous import TimestampSigner

from serenity.db.session import Base
from serenity.models import Activity, Journal


@pytest.fixture()
def seeded(db_session):
    db_session.add_all(
        [
            Activity(title="Morning stretch", category="physical", estimated_duration=10),
            Activity(title="Evening run", category="physical", estimated_duration=30),
            Activity(title="Box breathing", category="mental", estimated_duration=5),
        ]
    )
    db_session.commit()


def test_dashboard_without_cookies_redirects_to_login(client, identity):
    response = client.get("/dashboard")

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert identity.get_user_calls == 0


@pytest.mark.parametrize("path", ["/chat", "/journal", "/journal/3", "/activities", "/insights"])
def test_every_protected_prefix_redirects_anonymous_users(client, path):
    response = client.get(path)

    assert response.status_code == 302
    assert response.headers["location"] == "/login"


def test_public_pages_need_no_session(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "Create an account" in response.text
    assert response.headers["X-Request-ID"]
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_login_page_with_session_redirects_home(client, signed_in):
    response = client.get("/login")

    assert response.status_code == 302
    assert response.headers["location"] == "/dashboard"


def test_login_page_without_session_renders_form(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert 'action="/login"' in response.text


def test_wrong_password_is_rejected(client, identity):
    identity.add_account("ada@example.com", "correct horse")

    response = client.post("/login", data={"email": "ada@example.com", "password": "battery staple"})

    assert response.status_code == 401
    assert "Invalid email or password" in response.text
    assert client.get("/dashboard").status_code == 302


def test_login_honours_local_next_only(client, identity):
    identity.add_account("ada@example.com", "correct horse")
    form = {"email": "ada@example.com", "password": "correct horse"}

    local = client.post("/login", data={**form, "next": "/journal"})
    assert local.headers["location"] == "/journal"

    client.post("/signout")
    offsite = client.post("/login", data={**form, "next": "//evil.example"})
    assert offsite.headers["location"] == "/dashboard"


def test_dashboard_verifies_session_once_per_request(client, identity, signed_in):
    identity.get_user_calls = 0

    response = client.get("/dashboard")

    assert response.status_code == 200
    assert "Welcome back, Ada" in response.text
    # The edge gate and the page dependency share one lookup.
    assert identity.get_user_calls == 1


def test_identity_outage_fails_closed(client, identity, signed_in):
    identity.fail = True

    assert client.get("/dashboard").headers["location"] == "/login"
    # The sign-in form is still reachable during the outage.
    assert client.get("/login").status_code == 200


def test_login_reports_outage(client, identity):
    identity.add_account("ada@example.com", "correct horse")
    identity.fail = True

    response = client.post("/login", data={"email": "ada@example.com", "password": "correct horse"})

    assert response.status_code == 503
    assert "temporarily unavailable" in response.text


@pytest.mark.parametrize("settings_overrides", [{"PROTECTED_PREFIXES": ""}])
def test_page_layer_still_enforces_when_edge_gate_lets_it_through(client, identity):
    response = client.get("/dashboard")

    assert response.status_code == 401
    assert "Please sign in to continue." in response.text
    assert "Welcome back" not in response.text


def test_signup_signs_the_user_in(client, identity):
    response = client.post(
        "/signup", data={"email": "new@example.com", "password": "s3cret!", "display_name": "Newbie"}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/dashboard"
    assert "Welcome back, Newbie" in client.get("/dashboard").text


def test_signout_clears_session(client, identity, signed_in):
    token = next(iter(identity.tokens))

    response = client.post("/signout")

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert response.headers["Clear-Site-Data"] == '"cache", "storage", "executionContexts"'
    assert response.headers["Cache-Control"] == "no-store, max-age=0"
    assert identity.signed_out == [token]

    follow_up = client.get("/dashboard")
    assert follow_up.status_code == 302
    assert follow_up.headers["location"] == "/login"


def test_signout_is_post_only(client):
    assert client.get("/signout").status_code == 405


def test_activities_api_requires_session(client, seeded):
    response = client.get("/api/activities")

    assert response.status_code == 401
    assert response.json()["code"] == "http_error"


def test_activities_api_lowercases_category(client, seeded, signed_in):
    response = client.get("/api/activities", params={"category": "Physical"})

    assert response.status_code == 200
    body = response.json()
    assert sorted(item["title"] for item in body) == ["Evening run", "Morning stretch"]
    assert {item["category"] for item in body} == {"physical"}


def test_activities_api_hides_backend_failures(client, engine, seeded, signed_in):
    Base.metadata.tables["activities"].drop(bind=engine)

    response = client.get("/api/activities")

    assert response.status_code == 500
    assert response.json() == {"code": "backend_error", "message": "Failed to fetch activities"}


def test_journal_api_roundtrip_and_missing_entry(client, signed_in):
    created = client.post("/api/journal", json={"title": "Sunday", "content": "Slept well.", "mood_score": 8})
    assert created.status_code == 201
    journal_id = created.json()["id"]

    detail = client.get(f"/api/journal/{journal_id}")
    assert detail.status_code == 200
    assert detail.json()["mood"] == "😊 Happy"
    assert detail.json()["entry"] == "Slept well."

    missing = client.get("/api/journal/9999")
    assert missing.status_code == 404
    assert missing.json() == {"code": "not_found", "message": "Journal not found"}


def test_journal_page_for_missing_entry_renders_not_found(client, signed_in):
    response = client.get("/journal/9999")

    assert response.status_code == 404
    assert "Not found" in response.text


def test_other_users_journal_is_not_found(client, db_session, signed_in):
    foreign = Journal(user_id="someone-else", content="private", created_at="2024-01-01T00:00:00+00:00")
    db_session.add(foreign)
    db_session.commit()

    assert client.get(f"/api/journal/{foreign.id}").status_code == 404
    assert client.get(f"/journal/{foreign.id}").status_code == 404


def test_mood_logging_and_trends(client, signed_in):
    assert client.get("/api/mood-trends").status_code == 404

    for score in (3, 4, 5):
        assert client.post("/api/moods", json={"score": score}).status_code == 201

    trends = client.get("/api/mood-trends").json()
    assert trends["total_entries"] == 3
    assert trends["average_mood"] == 4.0
    assert trends["mood_trend"] == "improving"
    assert "Average mood 4.0 / 5" in client.get("/insights").text


def test_mood_score_is_validated(client, signed_in):
    response = client.post("/api/moods", json={"score": 11})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_user_activity_flow(client, db_session, seeded, signed_in):
    activity_id = client.get("/api/activities", params={"category": "mental"}).json()[0]["id"]

    planned = client.post("/api/user-activities", json={"activity_id": activity_id})
    assert planned.status_code == 201
    record_id = planned.json()["id"]

    in_progress = client.get("/api/user-activities", params={"status": "in_progress"}).json()
    assert [item["activity"]["title"] for item in in_progress] == ["Box breathing"]

    done = client.patch(f"/api/user-activities/{record_id}", json={"status": "completed", "reflection": "Helped"})
    assert done.status_code == 200
    assert done.json()["completed_at"]

    assert client.patch("/api/user-activities/9999", json={"status": "completed"}).status_code == 404
    assert client.get("/api/user-activities", params={"status": "bogus"}).status_code == 422


def test_static_assets_bypass_the_gate(client, identity):
    response = client.get("/static/styles.css")

    assert response.status_code == 200
    assert identity.get_user_calls == 0


def test_completing_with_null_timestamp_still_stamps_it(client, seeded, signed_in):
    activity_id = client.get("/api/activities").json()[0]["id"]
    record_id = client.post("/api/user-activities", json={"activity_id": activity_id}).json()["id"]

    response = client.patch(f"/api/user-activities/{record_id}", json={"status": "completed", "completed_at": None})

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["completed_at"]


def test_malformed_journal_id_renders_not_found_page(client, signed_in):
    response = client.get("/journal/abc", headers={"Accept": "text/html"})

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")
    assert "Not found" in response.text
    # The JSON API keeps strict validation.
    assert client.get("/api/journal/abc").status_code == 422


def test_recommended_activities_api(client, seeded, signed_in):
    assert client.get("/api/recommended-activities").status_code == 200

    response = client.get("/api/recommended-activities", params={"mood_tags": '["anxious"]', "limit": 2})

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "private, max-age=60"
    body = response.json()
    assert body["mood_tags"] == ["anxious"]
    assert [item["title"] for item in body["activities"]] == ["Box breathing", "Evening run"]


def test_recommended_activities_api_requires_session(client, seeded):
    assert client.get("/api/recommended-activities").status_code == 401


def test_recommended_activities_api_hides_backend_failures(client, engine, seeded, signed_in):
    Base.metadata.tables["activities"].drop(bind=engine)

    response = client.get("/api/recommended-activities", params={"mood_tags": "sad"})

    assert response.status_code == 500
    assert response.json() == {"code": "backend_error", "message": "Failed to fetch recommended activities"}


@pytest.mark.parametrize("path", ["/dashboard", "/activities"])
def test_pages_show_recommendations(client, seeded, signed_in, path):
    client.post("/api/moods", json={"score": 1})

    response = client.get(path)

    assert response.status_code == 200
    assert "Recommended for you" in response.text
    assert "Based on feeling sad." in response.text


def test_session_cookie_holds_only_the_access_token(client, settings, signed_in):
    raw = client.cookies[settings.SESSION_COOKIE_NAME]

    data = json.loads(b64decode(TimestampSigner(settings.APP_SECRET).unsign(raw)))

    assert list(data) == ["sb_access_token"]


def test_request_id_is_echoed_and_signed_in_pages_are_not_cached(client, signed_in):
    response = client.get("/dashboard", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.headers["Cache-Control"] == "private, no-store"

    anonymous = client.get("/", headers={"X-Request-ID": "x" * 500})
    assert len(anonymous.headers["X-Request-ID"]) == 32
