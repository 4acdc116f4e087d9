from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

# FastAPI's own validation schemas; our 422s are ProblemDetail documents
_DEFAULT_VALIDATION_SCHEMAS = ("HTTPValidationError", "ValidationError")


def _drop_default_422(operation: dict) -> None:
    responses = operation.get("responses", {})
    ref = (
        responses.get("422", {})
        .get("content", {})
        .get("application/json", {})
        .get("schema", {})
        .get("$ref", "")
    )
    if ref.endswith("/HTTPValidationError"):
        responses.pop("422")


def custom_openapi(app: FastAPI) -> dict:
    """Build the schema once, documenting RFC 7807 errors only."""
    if app.openapi_schema is None:
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        for operations in schema.get("paths", {}).values():
            for operation in operations.values():
                _drop_default_422(operation)

        components = schema.get("components", {}).get("schemas", {})
        for name in _DEFAULT_VALIDATION_SCHEMAS:
            components.pop(name, None)

        app.openapi_schema = schema
    return app.openapi_schema
