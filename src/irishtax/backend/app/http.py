"""HTTP helpers shared across Flask blueprints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from flask import Flask, Request, jsonify
from werkzeug.exceptions import BadRequest

from irishtax.backend.config.schema import ConfigurationError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProblemResponse:
    """RFC 7807-style error payload returned by every endpoint."""

    error: str
    status: int
    message: str | None = None

    def to_response(self) -> tuple[Any, int]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        return jsonify(payload), self.status


def problem_response(error: str, *, status: int, message: str | None = None) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message)


def parse_json_object(req: Request) -> dict[str, Any]:
    """Extract a JSON object body from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")
    return dict(data)


def register_error_handlers(app: Flask) -> None:
    """Map domain and transport errors onto problem responses."""

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(FileNotFoundError)
    def handle_unknown_year(error: FileNotFoundError):
        return problem_response("not_found", status=404, message=str(error)).to_response()

    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error: ConfigurationError):
        _LOGGER.error("Tax year configuration is invalid: %s", error)
        return problem_response(
            "configuration_error",
            status=500,
            message="Tax configuration could not be loaded",
        ).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        _LOGGER.info("Rejected calculation payload: %s", error)
        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()


__all__ = [
    "ProblemResponse",
    "parse_json_object",
    "problem_response",
    "register_error_handlers",
]
