"""Interactive Swagger UI for a generated API document.

The server only renders documentation; it never calls the contract.
"""

from __future__ import annotations

from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

DOCS_PATH = "/docs"
SPEC_PATH = "/openapi.json"


class HealthResponse(BaseModel):
    message: str


def create_app(document: dict[str, Any], contract_name: str) -> FastAPI:
    """Create an app serving ``document`` as JSON and as Swagger UI."""
    # FastAPI's own docs routes would describe this app, not the contract.
    app = FastAPI(title=f"{contract_name} Interactive Docs", docs_url=None, redoc_url=None, openapi_url=None)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(message=f"Swagger UI for {contract_name} at {DOCS_PATH}")

    @app.get(SPEC_PATH, include_in_schema=False)
    async def spec() -> JSONResponse:
        return JSONResponse(document)

    @app.get(DOCS_PATH, include_in_schema=False)
    async def docs() -> HTMLResponse:
        return get_swagger_ui_html(
            openapi_url=SPEC_PATH,
            title=f"{contract_name} Interactive Docs",
            swagger_ui_parameters={"persistAuthorization": True},
        )

    return app


def serve(document: dict[str, Any], contract_name: str, host: str = "127.0.0.1", port: int = 3000) -> None:
    """Run the docs server until interrupted."""
    uvicorn.run(create_app(document, contract_name), host=host, port=port, log_level="warning")
