# backend/tests/test_api.py

import pytest


@pytest.fixture
def room(client):
    resp = client.post("/rooms/", json={"name": "Hall", "capacity": 20})
    assert resp.status_code == 201
    return resp.json()


def series_body(room_ids, **recurrence):
    return {
        "room_ids": room_ids,
        "requester_id": "u-1",
        "start_time": "9:00",
        "end_time": "10:00",
        "event_name": "Choir practice",
        "recurrence": {
            "pattern": "weekly",
            "anchor_date": "2025-01-06",
            "end_date": "2025-01-20",
            "weekly_days": [1, 3],
            **recurrence,
        },
    }


def booking_body(room_ids, **fields):
    return {
        "room_ids": room_ids,
        "requester_id": "u-2",
        "date": "2025-01-08",
        "start_time": "09:30",
        "end_time": "10:30",
        "event_name": "Interview",
        **fields,
    }


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "redis": True}


def test_rooms_crud(client, room):
    assert [r["name"] for r in client.get("/rooms/").json()] == ["Hall"]

    resp = client.patch(f"/rooms/{room['id']}", json={"capacity": 30})
    assert resp.json()["capacity"] == 30

    assert client.delete(f"/rooms/{room['id']}").status_code == 204
    assert client.get("/rooms/").json() == []
    assert client.get(f"/rooms/{room['id']}").json()["is_active"] is False
    assert client.get("/rooms/999").status_code == 404


def test_create_series(client, room, fake_redis):
    resp = client.post("/series/", json=series_body([room["id"]]))
    assert resp.status_code == 201

    data = resp.json()
    assert data["outcome"] == "created"
    assert data["created_count"] == 5
    assert data["occurrences"] == [
        "2025-01-06", "2025-01-08", "2025-01-13", "2025-01-15", "2025-01-20",
    ]
    assert {b["start_time"] for b in data["created"]} == {"09:00"}
    assert [e["type"] for e in fake_redis.events()] == ["booking_series_created"]


def test_series_conflicts_are_reported(client, room):
    client.post("/bookings/", json=booking_body([room["id"]]))

    data = client.post("/series/", json=series_body([room["id"]])).json()
    assert data["outcome"] == "partial"
    assert data["created_count"] == 4
    assert [(f["date"], f["reason"]) for f in data["failures"]] == [("2025-01-08", "slot_conflict")]


def test_series_rejects_invalid_rule(client, room):
    resp = client.post("/series/", json=series_body([room["id"]], end_date="2025-01-06"))
    assert resp.status_code == 400
    assert client.get("/bookings/").json() == []


def test_series_rejects_unknown_room(client, room):
    resp = client.post("/series/", json=series_body([room["id"], 999]))
    assert resp.status_code == 400


def test_series_rejects_inverted_times(client, room):
    body = series_body([room["id"]])
    body["start_time"] = "11:00"
    assert client.post("/series/", json=body).status_code == 400


def test_bad_time_is_422(client, room):
    body = series_body([room["id"]])
    body["end_time"] = "25:00"
    assert client.post("/series/", json=body).status_code == 422


def test_preview(client):
    resp = client.post("/series/preview", json={
        "pattern": "monthly",
        "anchor_date": "2025-01-01",
        "end_date": "2025-04-30",
        "monthly_week_of_month": 5,
        "monthly_day_of_week": 6,
    })
    data = resp.json()

    assert resp.status_code == 200
    assert data["occurrences"] == ["2025-01-25", "2025-02-22", "2025-03-29", "2025-04-26"]
    assert data["weekdays"] == ["Sat"] * 4
    assert data["count"] == 4
    assert data["truncated"] is False
    assert client.get("/bookings/").json() == []


def test_preview_invalid(client):
    resp = client.post("/series/preview", json={"pattern": "daily", "anchor_date": "2025-01-06"})
    assert resp.status_code == 400


def test_series_summary_and_group_approve(client, room):
    data = client.post("/series/", json=series_body([room["id"]])).json()
    group_id = data["booking_group_id"]
    anchor = data["created"][0]

    summary = client.get(f"/series/{group_id}").json()
    assert summary["total"] == 5
    assert summary["series_status"] == "pending"
    assert [a["id"] for a in summary["anchors"]] == [anchor["id"]]
    assert summary["members"][0]["id"] == anchor["id"]

    resp = client.post(
        f"/bookings/{data['created'][2]['id']}/actions",
        json={"action": "approve", "scope": "group"},
    )
    assert resp.status_code == 200
    assert resp.json()["succeeded"] == 5

    summary = client.get(f"/series/{group_id}").json()
    assert summary["series_status"] == "all_confirmed"


def test_unknown_series(client):
    assert client.get("/series/nope").status_code == 404


def test_single_booking(client, room, fake_redis):
    resp = client.post("/bookings/", json=booking_body([room["id"]]))
    assert resp.status_code == 201

    data = resp.json()
    assert data["booking_group_id"] is None
    booking = data["created"][0]
    assert client.get(f"/bookings/{booking['id']}").json()["event_name"] == "Interview"
    assert [e["type"] for e in fake_redis.events()] == ["booking_created"]


def test_single_booking_conflict_is_409(client, room):
    client.post("/bookings/", json=booking_body([room["id"]]))
    resp = client.post("/bookings/", json=booking_body([room["id"]], start_time="10:00", end_time="11:00"))
    assert resp.status_code == 409


def test_back_to_back_single_bookings(client, room):
    client.post("/bookings/", json=booking_body([room["id"]]))
    resp = client.post("/bookings/", json=booking_body([room["id"]], start_time="10:30", end_time="11:30"))
    assert resp.status_code == 201


def test_single_actions(client, room, fake_redis):
    booking = client.post("/bookings/", json=booking_body([room["id"]])).json()["created"][0]

    resp = client.post(
        f"/bookings/{booking['id']}/actions",
        json={"action": "cancel", "reason": "double booked"},
    )
    assert resp.status_code == 200
    changed = resp.json()["changed"][0]
    assert changed["status"] == "cancelled"
    assert changed["cancel_reason"] == "double booked"
    assert fake_redis.events()[-1]["type"] == "booking_status_changed"

    resp = client.post(f"/bookings/{booking['id']}/actions", json={"action": "approve"})
    assert resp.status_code == 409


def test_action_on_unknown_booking(client):
    resp = client.post("/bookings/missing/actions", json={"action": "approve"})
    assert resp.status_code == 404


def test_group_cancel_skips_cancelled(client, room):
    data = client.post("/series/", json=series_body([room["id"]])).json()
    first, second = data["created"][:2]
    client.post(f"/bookings/{second['id']}/actions", json={"action": "reject"})

    report = client.post(
        f"/bookings/{first['id']}/actions",
        json={"action": "cancel", "scope": "group"},
    ).json()

    assert report["succeeded"] == 4
    assert [s["booking_id"] for s in report["skipped"]] == [second["id"]]

    summary = client.get(f"/series/{data['booking_group_id']}").json()
    assert summary["series_status"] == "all_cancelled"


def test_list_bookings_filters(client, room):
    data = client.post("/series/", json=series_body([room["id"]])).json()
    client.post("/bookings/", json=booking_body([room["id"]], date="2025-02-01"))

    assert len(client.get("/bookings/").json()) == 6
    group = client.get("/bookings/", params={"group_id": data["booking_group_id"]}).json()
    assert len(group) == 5
    assert client.get("/bookings/", params={"status": "confirmed"}).json() == []


def test_delete_group(client, room, fake_redis):
    data = client.post("/series/", json=series_body([room["id"]])).json()

    resp = client.delete(f"/bookings/{data['created'][0]['id']}", params={"scope": "group"})
    assert resp.status_code == 200
    assert resp.json()["succeeded"] == 5
    assert client.get("/bookings/").json() == []
    assert fake_redis.events()[-1]["type"] == "booking_deleted"


def test_delete_unknown(client):
    assert client.delete("/bookings/missing").status_code == 404


def test_patch_not_allowed(client, room):
    booking = client.post("/bookings/", json=booking_body([room["id"]])).json()["created"][0]
    assert client.patch(f"/bookings/{booking['id']}", json={"date": "2025-02-01"}).status_code == 405


def test_multi_room_series(client):
    rooms = [client.post("/rooms/", json={"name": n}).json()["id"] for n in ("A", "B")]
    data = client.post("/series/", json=series_body(rooms)).json()

    assert data["requested"] == 10
    assert data["created_count"] == 10
    summary = client.get(f"/series/{data['booking_group_id']}").json()
    assert summary["room_ids"] == rooms
    assert len(summary["anchors"]) == 2
