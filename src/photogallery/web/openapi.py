from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Photo Gallery API",
            version="0.1.0",
            summary="Personal photo gallery with owner uploads, likes and comments",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": "session",
                "description": "Signed session token issued after GitHub login",
            },
        }

        # Only owner endpoints require the session cookie
        owner_endpoints = {
            ("POST", "/api/upload"),
            ("DELETE", "/api/comments/{comment_id}"),
        }

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in owner_endpoints:
                    operation["security"] = [{"SessionCookie": []}]

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Unauthorized", "type": "authentication_error"},
                {"message": "Forbidden", "type": "access_denied"},
                {"message": "Rate limit exceeded. Please try again later.", "type": "rate_limited"},
            ]
        }
    }


class SuccessResponse(BaseModel):
    success: bool = True
