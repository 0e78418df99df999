"""REST endpoints for Form 11 calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from irishtax.backend.app.http import parse_json_object
from irishtax.backend.app.models import VehicleBenefitRequest, format_validation_error
from irishtax.backend.app.services.calculation_service import (
    calculate_tax,
    calculate_vehicle_benefit,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Compute a self-assessed return from the submitted JSON payload."""

    payload = parse_json_object(request)
    result = calculate_tax(payload)

    return jsonify(result), 200


@blueprint.post("/vehicle-bik")
def create_vehicle_benefit() -> tuple[Any, int]:
    """Derive a company vehicle benefit-in-kind from value and mileage."""

    payload = parse_json_object(request)
    try:
        vehicle = VehicleBenefitRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc

    result = calculate_vehicle_benefit(
        vehicle.original_market_value,
        vehicle.annual_business_km,
        vehicle.year,
    )
    return jsonify(result), 200
