"""Expose the YAML-backed tax constants to API consumers."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from irishtax.backend.config.year_config import (
    available_years,
    load_manifest,
    load_year_configuration,
)
from irishtax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    supported_years = list(available_years())
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


@blueprint.get("/meta")
def get_meta() -> Any:
    """Return the running project version."""

    return jsonify({"version": get_project_version()})


@blueprint.get("/years")
def list_years() -> Any:
    """List declared tax years with their manifest status."""

    manifest = load_manifest()
    years = [
        {"year": entry.year, "status": entry.status, "notes_url": entry.notes_url}
        for entry in sorted(manifest.years, key=lambda item: item.year)
    ]
    default_year = years[-1]["year"] if years else None
    return jsonify({"years": years, "default_year": default_year})


@blueprint.get("/<int:year>")
def get_year_constants(year: int) -> Any:
    """Return the full constants table for ``year``."""

    configuration = load_year_configuration(year)
    return jsonify(configuration.model_dump(mode="json", by_alias=True))
