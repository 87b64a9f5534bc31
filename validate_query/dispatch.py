"""
FastAPI integration for query validation.

Wires QueryHandler into an application's request cycle:
- get_query_handler / get_form_query_handler dependencies create one
  handler per request, cached on request.state
- a ValidationFailure exception handler reads the handler's active error
  target and renders the matching responder instead of the endpoint
- validated_query() builds a dependency that validates before the endpoint runs

Usage:
    app = FastAPI()
    errors = install_query_validation(app, log_level="notice")

    @errors.register("bad_pet")
    def bad_pet(request: Request, handler: QueryHandler | None) -> Response:
        return HTMLResponse("No such pet", status_code=404)

    @app.get("/pets")
    def show_pet(handler: QueryHandler = Depends(validated_query({"pet_id": "scalar"}))):
        return {"pet_id": handler.params.get("pet_id")}
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.responses import Response

from .config import ValidateQueryConfig, build_config
from .errors import UnknownErrorTarget, ValidationFailure
from .handler import QueryHandler
from .logging_config import get_logger
from .params import ParameterStore
from .settings import DEFAULT_ERROR_TARGET, Settings, get_settings

logger = logging.getLogger(__name__)

ErrorResponder = Callable[[Request, QueryHandler | None], Response | Awaitable[Response]]

ERROR_PAGE = (
    "<html><head><title>Request not understood</title></head>"
    "<body>The request submitted could not be understood.</body></html>"
)

# Log sink handed to every handler created by the dependencies below
REQUEST_LOGGER_NAME = "validate_query.requests"


class ErrorTargetRegistry:
    """Maps error target names to the responders that render them."""

    def __init__(self, status_code: int = 400):
        self.status_code = status_code
        self._responders: dict[str, ErrorResponder] = {DEFAULT_ERROR_TARGET: self.validate_query_error_mode}

    def validate_query_error_mode(self, request: Request, handler: QueryHandler | None) -> Response:
        """Built-in error target: a fixed page that never reveals the failure detail."""
        return HTMLResponse(ERROR_PAGE, status_code=self.status_code)

    def register(self, name: str, responder: ErrorResponder | None = None) -> Any:
        """
        Register a responder for an error target.

        Can be called directly or used as a decorator:

            @registry.register("bad_pet")
            def bad_pet(request, handler): ...
        """
        if responder is not None:
            self._responders[name] = responder
            return responder

        def decorator(func: ErrorResponder) -> ErrorResponder:
            self._responders[name] = func
            return func

        return decorator

    def resolve(self, name: str) -> ErrorResponder:
        try:
            return self._responders[name]
        except KeyError:
            raise UnknownErrorTarget(f"No responder registered for error target {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._responders


@dataclass
class QueryValidationState:
    """Per-application state stored on app.state.query_validation."""

    registry: ErrorTargetRegistry
    default_config: ValidateQueryConfig


def install_query_validation(
    app: FastAPI,
    registry: ErrorTargetRegistry | None = None,
    settings: Settings | None = None,
    **options: Any,
) -> ErrorTargetRegistry:
    """
    Enable query validation on an application.

    Args:
        app: FastAPI application
        registry: Error target registry (a new one is created if omitted)
        settings: Settings providing defaults (cached settings if omitted)
        **options: Default handler configuration, overriding settings

    Returns:
        The registry used to resolve error targets
    """
    settings = settings or get_settings()
    registry = registry or ErrorTargetRegistry(status_code=settings.error_status_code)
    defaults: dict[str, Any] = {"error_target": settings.error_target, "log_level": settings.log_level}
    defaults.update(options)
    # Handlers created here always carry a stdlib logger
    default_config = build_config(defaults, can_log=True)

    app.state.query_validation = QueryValidationState(registry=registry, default_config=default_config)
    app.add_exception_handler(ValidationFailure, handle_validation_failure)  # type: ignore[arg-type]
    logger.info(f"Query validation installed (error_target={default_config.error_target})")
    return registry


def _get_state(request: Request) -> QueryValidationState:
    state = getattr(request.app.state, "query_validation", None)
    if state is None:
        raise RuntimeError("install_query_validation() has not been called for this application")
    return state


async def handle_validation_failure(request: Request, exc: ValidationFailure) -> Response:
    """Re-dispatch a failed request to its handler's active error target."""
    state = _get_state(request)
    handler: QueryHandler | None = getattr(request.state, "query_handler", None)
    target = handler.error_target if handler is not None and handler.error_target else exc.target

    try:
        responder = state.registry.resolve(target)
    except UnknownErrorTarget:
        logger.error(f"Validation failed for {request.url.path} but error target {target!r} is not registered")
        raise

    response = responder(request, handler)
    if inspect.isawaitable(response):
        response = await response
    return response


def _new_handler(request: Request, params: ParameterStore) -> QueryHandler:
    handler = QueryHandler(
        params=params,
        logger=get_logger(REQUEST_LOGGER_NAME),
        config=_get_state(request).default_config,
    )
    request.state.query_handler = handler
    return handler


def get_query_handler(request: Request) -> QueryHandler:
    """FastAPI dependency returning this request's handler, built from the query string."""
    handler: QueryHandler | None = getattr(request.state, "query_handler", None)
    if handler is None:
        handler = _new_handler(request, ParameterStore.from_multi_items(request.query_params))
    return handler


async def get_form_query_handler(request: Request) -> QueryHandler:
    """FastAPI dependency returning this request's handler, built from query string and form fields."""
    handler: QueryHandler | None = getattr(request.state, "query_handler", None)
    if handler is None:
        form = await request.form()
        handler = _new_handler(request, ParameterStore.from_multi_items(request.query_params, form))
    return handler


def validated_query(
    rules: Mapping[str, Any] | None = None,
    *,
    form: bool = False,
    config: Mapping[str, Any] | None = None,
    **rule_kwargs: Any,
) -> Callable[[Request], Awaitable[QueryHandler]]:
    """
    Build a dependency that validates the request before the endpoint runs.

    Args:
        rules: Rule set mapping
        form: Also validate urlencoded / multipart form fields
        config: Handler configuration for this route (replaces the app default)
        **rule_kwargs: Rules given as keyword arguments

    Returns:
        Dependency resolving to the validated QueryHandler
    """
    rule_set = {**(rules or {}), **rule_kwargs}
    route_config = dict(config) if config is not None else None

    async def dependency(request: Request) -> QueryHandler:
        handler = await get_form_query_handler(request) if form else get_query_handler(request)
        if route_config is not None:
            handler.validate_query_config(route_config)
        handler.validate_query(rule_set)
        return handler

    return dependency
