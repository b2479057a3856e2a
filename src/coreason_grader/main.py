# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

"""
Execution API: compile and run Rust submissions in throwaway Cargo projects.

    POST /api/run   build, then run once with optional args
    POST /api/test  build, then evaluate the supplied test definitions
"""

from collections.abc import Awaitable, Callable
from typing import Any

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from coreason_grader import __version__
from coreason_grader.config import GraderConfig
from coreason_grader.models import RunRequest, RunResponse, TestRequest, TestRunResult
from coreason_grader.service import GraderService
from coreason_grader.utils.logger import logger


class InvalidBody(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


async def _read_body(request: Request, model: type[BaseModel]) -> Any:
    try:
        payload = await request.json()
    except ValueError:
        raise InvalidBody("Invalid JSON") from None
    if not isinstance(payload, dict):
        raise InvalidBody("Invalid request body")
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Rejected {request.url.path} body: {e.error_count()} validation error(s)")
        raise InvalidBody("Invalid request body") from None


def _dump(body: BaseModel) -> dict[str, Any]:
    return body.model_dump(by_alias=True, exclude_none=True)


def create_app(config: GraderConfig | None = None, service: GraderService | None = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Service configuration. Read from the environment when omitted.
        service: Optional pre-built service, mainly for tests.

    Returns:
        FastAPI: The configured application.
    """
    config = config or GraderConfig()
    grader = service or GraderService(config)
    cors_headers = {"Access-Control-Allow-Origin": config.cors_origin}

    app = FastAPI(
        title="CoReason Grader",
        description="Compiles, runs and grades learner-submitted Rust code",
        version=__version__,
    )
    app.state.grader = grader

    @app.middleware("http")
    async def cors_and_methods(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(
                status_code=204,
                headers={
                    **cors_headers,
                    "Access-Control-Allow-Methods": "POST, OPTIONS",
                    "Access-Control-Allow-Headers": "Content-Type",
                    "Access-Control-Max-Age": "86400",
                },
            )
        if request.method != "POST":
            return JSONResponse({"error": "Method not allowed"}, status_code=405, headers=cors_headers)

        response = await call_next(request)
        response.headers.update(cors_headers)
        return response

    @app.exception_handler(InvalidBody)
    async def invalid_body(request: Request, exc: InvalidBody) -> JSONResponse:
        return JSONResponse({"error": exc.message}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse({"error": message}, status_code=exc.status_code)

    @app.post("/api/run")
    async def run(request: Request) -> JSONResponse:
        body: RunRequest = await _read_body(request, RunRequest)
        try:
            result = await grader.run(body.code, body.args)
        except Exception as e:
            logger.exception("Unhandled error in /api/run")
            result = RunResponse(success=False, execution_error=str(e) or "Execution failed")
        return JSONResponse(_dump(result))

    @app.post("/api/test")
    async def grade(request: Request) -> JSONResponse:
        body: TestRequest = await _read_body(request, TestRequest)
        try:
            result = await grader.grade(body.code, body.tests)
        except Exception as e:
            logger.exception("Unhandled error in /api/test")
            result = TestRunResult(success=False, results=[], execution_error=str(e) or "Execution failed")
        return JSONResponse(_dump(result))

    return app


def main() -> None:
    """Entry point for the execution API."""
    config = GraderConfig()
    logger.info(f"Execution API listening on http://{config.host}:{config.port}")
    logger.info("  POST /api/run  - compile and run with optional args")
    logger.info("  POST /api/test - compile and run certification tests")
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level="info")


if __name__ == "__main__":  # pragma: no cover
    main()
