"""Integration coverage for configuration metadata endpoints."""

from http import HTTPStatus

from flask.testing import FlaskClient

from irishtax.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    assert response.get_json() == {"version": get_project_version()}


def test_list_years_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert [entry["year"] for entry in payload["years"]] == [2025]
    assert payload["years"][0]["status"] == "active"
    assert payload["default_year"] == 2025


def test_year_constants_endpoint_uses_file_aliases(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2025")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["year"] == 2025
    assert payload["income_tax"]["rate_cutoffs"]["single"] == 44_000
    assert payload["usc"]["bands"][0] == {"lower": 0, "upper": 12_012, "rate": 0.005}
    assert payload["pension"]["age_limits"][0]["max_age"] == 29
    assert payload["vehicle_bik"]["bands"][-1]["max_km"] is None


def test_year_constants_endpoint_unknown_year(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2019")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["error"] == "not_found"
