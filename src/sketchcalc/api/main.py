"""SketchCalc - FastAPI Application.

This module defines the application factory, the module-level ``app``
instance, all REST API routes, and the ``main()`` CLI function that
launches the uvicorn server.

Architecture
------------
The application is stateless:

- **Configuration** (the Gemini API key and model name) is injected into
  :func:`create_app` and stored on ``app.state``.  Handlers never read the
  process environment.
- **The model call** goes through a :class:`~sketchcalc.core.model_client.ModelClient`,
  also stored on ``app.state``; tests pass a stub.
- **Reply parsing** is done by :class:`~sketchcalc.api.normalizer.ResponseNormalizer`.
- **Errors** are domain exceptions converted to JSON by a single
  exception handler.

Request Flow (``POST /calculate``)
----------------------------------
1. Refuse with 500 if no API key is configured.
2. Validate the body shape (400 on failure).
3. Render the prompt and extract the base64 image body.
4. Call the model (500 on failure).
5. Recover result records from the reply (500 if nothing is recoverable).
6. Return ``success`` or ``warning``.

Endpoints
---------
========  ================  ==========================================
Method    Path              Purpose
========  ================  ==========================================
GET       ``/``             Health probe
POST      ``/calculate``    Read and solve the math in a drawing
========  ================  ==========================================

Usage
-----
CLI (installed entry point)::

    sketchcalc

Direct invocation::

    python -m sketchcalc.api.main
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sketchcalc import __version__
from sketchcalc.api.models import CalculationResponse
from sketchcalc.api.normalizer import ResponseNormalizer, build_response
from sketchcalc.api.prompt_builder import build_prompt, extract_image_data
from sketchcalc.api.validation import ensure_api_key, validate_calculation_request
from sketchcalc.core.config import SketchcalcConfig, config
from sketchcalc.core.errors import SketchcalcError
from sketchcalc.core.model_client import GeminiModelClient, ModelClient

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Error handling.
# ---------------------------------------------------------------------------


async def handle_sketchcalc_error(request: Request, exc: SketchcalcError) -> JSONResponse:
    """Convert a domain exception into its JSON error response."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/")
async def health() -> dict:
    """Health probe.

    Returns:
        ``{"message": "Server is running"}``.
    """
    return {"message": "Server is running"}


@router.post("/calculate", response_model=CalculationResponse)
async def calculate(request: Request) -> CalculationResponse:
    """Read the math in a drawing and return the solved expressions.

    The body is read manually rather than through a Pydantic parameter so
    that the configuration check runs before the body is inspected, and so
    that shape errors produce the documented 400 messages.

    Args:
        request: Incoming request with a JSON body
            ``{"image": str, "dict_of_vars": object}``.

    Returns:
        :class:`CalculationResponse` with status ``success`` or ``warning``.

    Raises:
        ConfigurationError: 500 when the API key is not configured.
        ValidationError: 400 for a malformed body.
        UpstreamError: 500 when the model call fails.
        ParseError: 500 when no records can be recovered from the reply.
    """
    app_config: SketchcalcConfig = request.app.state.config
    ensure_api_key(app_config)

    try:
        body = await request.json()
    except ValueError:
        body = None
    calc_request = validate_calculation_request(body)

    model_client: ModelClient = request.app.state.model_client
    normalizer: ResponseNormalizer = request.app.state.normalizer

    try:
        prompt = build_prompt(calc_request.dict_of_vars)
        image_data = extract_image_data(calc_request.image)

        text = await model_client.generate(prompt, image_data)
        logger.info(f"Gemini response: {text}")

        records = normalizer.normalize(text)
        return build_response(records, text)
    except SketchcalcError:
        raise
    except Exception as e:
        logger.exception("Error in /calculate route")
        raise SketchcalcError("Failed to process image", error=str(e)) from e


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    app_config: SketchcalcConfig = config,
    model_client: ModelClient | None = None,
    normalizer: ResponseNormalizer | None = None,
) -> FastAPI:
    """Build a configured FastAPI application.

    When no *model_client* is given and the configuration carries a usable
    API key, a :class:`GeminiModelClient` is created.  Without a key no
    client is created; ``POST /calculate`` then answers with a
    configuration error instead of the process failing to start.

    Args:
        app_config: Configuration to serve with.
        model_client: Model client to use instead of Gemini.
        normalizer: Reply normalizer; defaults to the standard chain.

    Returns:
        The FastAPI application.
    """
    app = FastAPI(
        title="SketchCalc",
        description="Reads handwritten math from a drawing and returns the solved expressions.",
        version=__version__,
    )

    # Any origin may call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if model_client is None and app_config.has_api_key:
        model_client = GeminiModelClient(
            api_key=app_config.gemini_api_key,
            model_name=app_config.gemini_model,
        )
    elif model_client is None:
        logger.warning("GEMINI_API_KEY is not set; /calculate will report a configuration error.")

    app.state.config = app_config
    app.state.model_client = model_client
    app.state.normalizer = normalizer or ResponseNormalizer()

    app.add_exception_handler(SketchcalcError, handle_sketchcalc_error)
    app.include_router(router)
    return app


app = create_app(config)


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~sketchcalc.core.config.config`
    (``SKETCHCALC_SERVER_HOST``, ``SKETCHCALC_SERVER_PORT`` and
    ``SKETCHCALC_LOG_LEVEL``).  Defaults to ``0.0.0.0:8787``.

    This function is registered as the ``sketchcalc`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "sketchcalc.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
