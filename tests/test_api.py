"""Tests for the HTTP API."""

from fastapi.testclient import TestClient

from fahrtenbuch.api.app import create_app


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_list_and_delete_entry(container, file_system, make_draft) -> None:
    client = TestClient(create_app(container))

    created = client.post("/entries", json=make_draft())

    assert created.status_code == 201
    entry = created.json()
    assert entry["photoUri"] == f"/data/photos/{entry['id']}.jpg"

    listed = client.get("/entries")
    assert listed.status_code == 200
    assert listed.json() == [entry]

    deleted = client.delete(f"/entries/{entry['id']}")
    assert deleted.status_code == 204
    assert client.get("/entries").json() == []
    assert entry["photoUri"] not in file_system.files


def test_delete_unknown_entry_is_no_content(container) -> None:
    client = TestClient(create_app(container))

    response = client.delete("/entries/unknown")

    assert response.status_code == 204


def test_create_entry_validation_error(container, make_draft) -> None:
    client = TestClient(create_app(container))

    response = client.post("/entries", json=make_draft(mileage="viel"))

    assert response.status_code == 422
    assert "mileage" in response.json()["detail"]


def test_create_entry_with_missing_photo_is_rejected(container, make_draft) -> None:
    client = TestClient(create_app(container))

    response = client.post("/entries", json=make_draft(photoUri="/cache/none.jpg"))

    assert response.status_code == 422
    assert client.get("/entries").json() == []


def test_export_and_import_endpoints(container, share_target, make_draft) -> None:
    client = TestClient(create_app(container))
    client.post("/entries", json=make_draft())

    exported = client.post("/export")
    assert exported.status_code == 200
    path = exported.json()["path"]
    assert share_target.shared == [(path, "text/csv")]

    imported = client.post("/import", json={"path": path})
    assert imported.status_code == 200
    assert imported.json() == {"imported": 1, "skipped": 0}
    entries = client.get("/entries").json()
    assert entries[0]["location"] == {
        "latitude": 0.0,
        "longitude": 0.0,
        "address": "Main St",
    }
    assert entries[0]["photoUri"] == ""


def test_export_unavailable_maps_to_503(container, share_target) -> None:
    share_target.available = False
    client = TestClient(create_app(container))

    response = client.post("/export")

    assert response.status_code == 503


def test_import_missing_file_maps_to_400(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/import", json={"path": "/import/missing.csv"})

    assert response.status_code == 400


def test_corrupt_storage_maps_to_500(container, storage) -> None:
    storage.values["@fahrtenbuch_entries"] = "[{"
    client = TestClient(create_app(container))

    response = client.get("/entries")

    assert response.status_code == 500
    assert response.json() == {"detail": "Stored entries could not be parsed"}


def test_reverse_location(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/locations/reverse", params={"latitude": 52.5, "longitude": 13.4})

    assert response.status_code == 200
    assert response.json()["address"] == "Hauptstraße, 5, 10115, Berlin"


def test_reverse_location_without_result_maps_to_502(container, geocoder) -> None:
    geocoder.components = None
    client = TestClient(create_app(container))

    response = client.get("/locations/reverse", params={"latitude": 1, "longitude": 1})

    assert response.status_code == 502


def test_manual_location(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/locations/manual", json={"address": " Am Markt 1, Bonn "})

    assert response.status_code == 200
    assert response.json() == {
        "latitude": 0.0,
        "longitude": 0.0,
        "address": "Am Markt 1, Bonn",
    }


def test_manual_location_blank_address_maps_to_422(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/locations/manual", json={"address": "  "})

    assert response.status_code == 422
