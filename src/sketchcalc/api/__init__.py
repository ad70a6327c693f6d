"""SketchCalc - FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, request validation, prompt compilation and model-reply parsing.

Modules
-------
main
    Application factory, route handlers and the ``main()`` CLI entry point.
models
    Pydantic models for the request and response bodies.
validation
    API-key readiness check and request body validation.
prompt_builder
    Instruction prompt rendering and data-URI handling.
normalizer
    Strategy chain that recovers result records from model replies.
"""
