from timetabler.services.calendar import load_calendar_config


def test_calendar_defaults_when_nothing_stored(client):
    response = client.get("/api/settings/calendar")
    assert response.status_code == 200
    payload = response.json()
    assert payload["num_weekdays"] == 5
    assert payload["num_daily_slots"] == 6
    assert payload["lab_slot_length"] == 2
    assert payload["id"] is None


def test_latest_calendar_config_wins(client):
    first = client.post(
        "/api/settings/calendar",
        json={"num_weekdays": 5, "num_daily_slots": 7, "lab_slot_length": 2},
    )
    assert first.status_code == 201
    second = client.post(
        "/api/settings/calendar",
        json={"num_weekdays": 6, "num_daily_slots": 8, "lab_slot_length": 3},
    )
    assert second.status_code == 201

    current = client.get("/api/settings/calendar").json()
    assert current["id"] == second.json()["id"]
    assert current["num_weekdays"] == 6
    assert current["num_daily_slots"] == 8
    assert current["lab_slot_length"] == 3


def test_calendar_config_is_validated(client):
    for payload in (
        {"num_weekdays": 7, "num_daily_slots": 6, "lab_slot_length": 2},
        {"num_weekdays": 4, "num_daily_slots": 6, "lab_slot_length": 2},
        {"num_weekdays": 5, "num_daily_slots": 0, "lab_slot_length": 2},
        {"num_weekdays": 5, "num_daily_slots": 6, "lab_slot_length": 0},
    ):
        response = client.post("/api/settings/calendar", json=payload)
        assert response.status_code == 422, payload


def test_six_day_calendar_drives_the_grid(client, trivial_catalog):
    client.post("/api/settings/calendar", json={"num_weekdays": 6, "num_daily_slots": 4, "lab_slot_length": 2})
    client.post("/api/timetable/generate", json={"random_seed": 1})

    grid = client.get(f"/api/timetable/divisions/{trivial_catalog['division'].id}/grid").json()
    assert grid["days"][-1] == "Saturday"
    assert grid["max_slots"] == 4


def store_calendar(client, weekdays=5, slots=6, lab=2):
    response = client.post(
        "/api/settings/calendar",
        json={"num_weekdays": weekdays, "num_daily_slots": slots, "lab_slot_length": lab},
    )
    assert response.status_code == 201
    return response.json()


def test_calendar_history_is_newest_first(client):
    first = store_calendar(client, slots=7)
    second = store_calendar(client, slots=8)

    response = client.get("/api/settings/calendar/history")
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == [second["id"], first["id"]]


def test_calendar_history_is_empty_without_records(client):
    assert client.get("/api/settings/calendar/history").json() == []


def test_calendar_config_by_id(client):
    stored = store_calendar(client, weekdays=6, slots=5, lab=3)

    response = client.get(f"/api/settings/calendar/{stored['id']}")
    assert response.status_code == 200
    assert response.json()["num_weekdays"] == 6
    assert response.json()["lab_slot_length"] == 3

    missing = client.get("/api/settings/calendar/999")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Calendar config with id 999 not found"


def test_update_calendar_config(client):
    stored = store_calendar(client)

    response = client.put(
        f"/api/settings/calendar/{stored['id']}",
        json={"num_weekdays": 6, "num_daily_slots": 9, "lab_slot_length": 3},
    )
    assert response.status_code == 200
    assert response.json()["id"] == stored["id"]
    assert response.json()["num_daily_slots"] == 9

    current = client.get("/api/settings/calendar").json()
    assert current["num_weekdays"] == 6
    assert current["num_daily_slots"] == 9


def test_update_calendar_config_is_validated(client):
    stored = store_calendar(client)

    response = client.put(
        f"/api/settings/calendar/{stored['id']}",
        json={"num_weekdays": 7, "num_daily_slots": 6, "lab_slot_length": 2},
    )
    assert response.status_code == 422
    assert client.get(f"/api/settings/calendar/{stored['id']}").json()["num_weekdays"] == 5


def test_update_missing_calendar_config(client):
    response = client.put(
        "/api/settings/calendar/42",
        json={"num_weekdays": 5, "num_daily_slots": 6, "lab_slot_length": 2},
    )
    assert response.status_code == 404


def test_delete_calendar_config(client):
    stored = store_calendar(client)

    response = client.delete(f"/api/settings/calendar/{stored['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/api/settings/calendar/{stored['id']}").status_code == 404
    assert client.delete(f"/api/settings/calendar/{stored['id']}").status_code == 404


def test_deleting_latest_calendar_falls_back_to_previous_record(client, db_session):
    previous = store_calendar(client, slots=7)
    latest = store_calendar(client, weekdays=6, slots=8)

    client.delete(f"/api/settings/calendar/{latest['id']}")

    config = load_calendar_config(db_session)
    assert config.id == previous["id"]
    assert config.num_daily_slots == 7


def test_deleting_only_calendar_falls_back_to_defaults(client, db_session):
    stored = store_calendar(client, weekdays=6, slots=8, lab=3)

    client.delete(f"/api/settings/calendar/{stored['id']}")

    config = load_calendar_config(db_session)
    assert config.id is None
    assert (config.num_weekdays, config.num_daily_slots, config.lab_slot_length) == (5, 6, 2)
