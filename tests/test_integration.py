import io
import json
import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from route_buddy.main import create_app
from route_buddy.services.matrix import DistanceMatrixEngine, LocationStore


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    from route_buddy.api.routes import exports
    from route_buddy.persistence.filesystem import FileStorage

    monkeypatch.setattr(exports, "FileStorage", lambda: FileStorage(root=tmp_path))

    store = LocationStore(DistanceMatrixEngine(latency_seconds=0, rng=random.Random(21)))
    return TestClient(create_app(store))


def _add(client: TestClient, name: str, lat, lng, address: str | None = None):
    payload = {"name": name, "lat": lat, "lng": lng}
    if address is not None:
        payload["address"] = address
    return client.post("/api/locations", json=payload)


def _seed(client: TestClient) -> None:
    assert _add(client, "A", 0, 0).status_code == 201
    assert _add(client, "B", 0, 1).status_code == 201


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_add_and_list_locations(api_client: TestClient):
    response = _add(api_client, "Paris", "48,8566", "2,3522", "Hotel de Ville")

    assert response.status_code == 201
    payload = response.json()
    assert payload["count"] == 1
    assert payload["hasMatrix"] is False
    assert payload["locations"][0]["lat"] == pytest.approx(48.8566)
    assert payload["locations"][0]["address"] == "Hotel de Ville"


def test_add_invalid_location_is_rejected(api_client: TestClient):
    response = _add(api_client, "Nowhere", 200, 0)

    assert response.status_code == 400
    assert api_client.get("/api/locations").json()["count"] == 0


def test_compute_matrix_requires_two_locations(api_client: TestClient):
    _add(api_client, "A", 0, 0)

    response = api_client.post("/api/matrix")

    assert response.status_code == 400


def test_compute_matrix_and_statistics(api_client: TestClient):
    _seed(api_client)

    response = api_client.post("/api/matrix")

    assert response.status_code == 200
    matrix = response.json()["distanceMatrix"]
    assert matrix[0][0] == 0 and matrix[1][1] == 0
    assert 133.4 <= matrix[0][1] <= 155.7
    assert api_client.get("/api/locations").json()["hasMatrix"] is True

    stats = api_client.get("/api/matrix/statistics").json()
    assert stats["hasData"] is True
    assert stats["count"] == 2
    assert stats["total"] == pytest.approx(matrix[0][1] + matrix[1][0])
    assert sum(bucket["count"] for bucket in stats["histogram"]) == 2


def test_remove_location_invalidates_matrix(api_client: TestClient):
    _seed(api_client)
    api_client.post("/api/matrix")

    response = api_client.delete("/api/locations/0")

    assert response.status_code == 200
    assert response.json()["hasMatrix"] is False
    assert api_client.get("/api/matrix").status_code == 409
    assert api_client.get("/api/matrix/statistics").status_code == 409


def test_remove_out_of_bounds_returns_404(api_client: TestClient):
    _seed(api_client)

    assert api_client.delete("/api/locations/5").status_code == 404
    assert api_client.get("/api/locations").json()["count"] == 2


def test_clear_locations(api_client: TestClient):
    _seed(api_client)

    response = api_client.delete("/api/locations")

    assert response.json()["count"] == 0


def test_import_csv_reports_skipped_rows(api_client: TestClient):
    content = b"A,10,20\nB,200,20\nC,-10,-20\n"

    response = api_client.post(
        "/api/locations/import",
        files={"file": ("points.csv", content, "text/csv")},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["imported"] == 2
    assert payload["skipped"] == 1
    assert payload["errors"][0]["row"] == 2
    assert payload["totalLocations"] == 2


def test_import_without_valid_rows_fails(api_client: TestClient):
    response = api_client.post(
        "/api/locations/import",
        files={"file": ("points.csv", b"A,100,0\n", "text/csv")},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["skipped"] == 1


def test_import_rejects_unsupported_suffix(api_client: TestClient):
    response = api_client.post(
        "/api/locations/import",
        files={"file": ("points.txt", b"A,1,2\n", "text/plain")},
    )

    assert response.status_code == 415


def test_path_distance(api_client: TestClient):
    _seed(api_client)

    payload = api_client.get("/api/locations/path").json()

    assert payload["legs"][0] == 0
    assert payload["totalKm"] == pytest.approx(111.19, abs=0.01)


def test_exports_require_matrix(api_client: TestClient):
    _seed(api_client)

    for kind in ("csv", "json", "xlsx"):
        assert api_client.get(f"/api/exports/{kind}").status_code == 409


def test_csv_export_download(api_client: TestClient):
    _seed(api_client)
    api_client.post("/api/matrix")

    response = api_client.get("/api/exports/csv")

    assert response.status_code == 200
    assert "distance_matrix_" in response.headers["content-disposition"]
    lines = response.text.split("\n")
    assert lines[0] == ",A,B"
    assert lines[1].startswith("A,0.00,")


def test_json_export_round_trips_matrix(api_client: TestClient):
    _seed(api_client)
    matrix = api_client.post("/api/matrix").json()["distanceMatrix"]

    document = json.loads(api_client.get("/api/exports/json").text)

    assert document["project"]["distanceMatrix"] == matrix
    assert [entry["name"] for entry in document["project"]["locations"]] == ["A", "B"]
    assert document["statistics"]["totalRoutes"] == 2


def test_xlsx_export_persists_to_data_root(api_client: TestClient, tmp_path: Path):
    _seed(api_client)
    api_client.post("/api/matrix")

    response = api_client.get("/api/exports/xlsx", params={"persist": "true"})

    assert response.status_code == 200
    workbook = load_workbook(io.BytesIO(response.content))
    assert workbook.sheetnames == ["Distance Matrix", "Locations"]
    saved = list((tmp_path / "outputs").glob("xlsx_*/route_buddy_*.xlsx"))
    assert len(saved) == 1


def test_project_export_without_matrix(api_client: TestClient):
    _seed(api_client)

    response = api_client.get("/api/exports/project")

    assert response.status_code == 200
    project = response.json()
    assert project["distanceMatrix"] is None
    assert len(project["locations"]) == 2


def test_unknown_export_kind(api_client: TestClient):
    assert api_client.get("/api/exports/pdf").status_code == 422


def test_create_app_keeps_injected_empty_store():
    store = LocationStore(DistanceMatrixEngine(latency_seconds=0, rng=random.Random(5)))

    app = create_app(store)

    assert len(store) == 0
    assert app.state.store is store


def test_compute_matrix_for_near_antipodal_locations(api_client: TestClient):
    assert _add(api_client, "East", 3.309661790284011, -89.77779913133884).status_code == 201
    assert _add(api_client, "West", -3.309661790284011, 90.22220086866116).status_code == 201

    response = api_client.post("/api/matrix")

    assert response.status_code == 200
    assert response.json()["distanceMatrix"][0][1] >= 6371.0 * 3.14 * 1.2
