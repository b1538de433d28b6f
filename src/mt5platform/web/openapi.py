from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="MT5 Platform API",
            version="1.0.0",
            summary="User and MT5 account management with session authentication",
            routes=app.routes,
        )

        components = openapi_schema.setdefault("components", {})
        components["securitySchemes"] = {
            "BearerSession": {
                "type": "http",
                "scheme": "bearer",
                "description": "Session id returned by login or register",
            },
        }

        openapi_schema["security"] = [{"BearerSession": []}]

        # Remove security from public endpoints
        public_endpoints = {
            ("POST", "/api/auth/login"),
            ("POST", "/api/auth/register"),
            ("GET", "/api/health"),
        }

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in public_endpoints:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "No session provided", "type": "authentication_error"},
                {"error": "Session expired", "type": "authentication_error"},
                {"error": "Admin access required", "type": "access_denied"},
            ]
        }
    }


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Human-readable result")
