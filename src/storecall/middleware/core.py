"""Store-call middleware: the request/success/failure lifecycle.

Usage:
    store = MemoryStore()
    middleware = create_middleware(store)

    # In the host pipeline: middleware(host)(next_)(action)
    action = {
        "CALL_STORE": {
            "types": ["USERS_REQUEST", "USERS_SUCCESS", "USERS_FAILURE"],
            "schema": {"name": "users"},
            "query": {"collection": "users", "where": "age >= 18", "method": "get"},
        }
    }
    result = await dispatch(action)

Lifecycle per marked action:
    1. validate (ConfigValidationError propagates, nothing dispatched)
    2. bailout(host.get_state()) true -> resolved awaitable, nothing dispatched
    3. request action dispatched synchronously
    4. query compiled
    5. store call: one-shot operations return an awaitable that dispatches
       exactly one success or failure action; onSnapshot returns the store's
       subscription handle and dispatches a success action per delivery
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from dataclasses import dataclass
from typing import Any

from storecall.config import MiddlewareSettings
from storecall.core.descriptor import ActionDescriptor, Operation, Subscribe, validate_config
from storecall.core.normalize import normalize
from storecall.core.query import CompiledReference, make_query_builder
from storecall.middleware.models import Action, Dispatch, HostStore
from storecall.tracing import ErrorContext, ErrorReporter, NullReporter, WarningReporter


async def _resolved(value: Any) -> Any:
    return value


def _schedule(coro: Coroutine[Any, Any, Any]) -> Awaitable[Any]:
    """Start ``coro`` as a Task when a loop is running, else hand it back unstarted."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return coro
    return loop.create_task(coro)


def _action_with(action: Mapping[str, Any], marker: str, **fields: Any) -> Action:
    """Original action with ``fields`` merged over it and the marker removed."""
    final = {**action, **fields}
    final.pop(marker, None)
    return final


@dataclass(slots=True)
class _Invocation:
    """State of one marked action, from request to success/failure."""

    marker: str
    descriptor: ActionDescriptor
    action: Mapping[str, Any]
    next_: Dispatch
    reporter: ErrorReporter
    reference: CompiledReference

    def action_with(self, **fields: Any) -> Action:
        return _action_with(self.action, self.marker, **fields)

    def succeed(self, response: Any) -> Any:
        payload = normalize(self.descriptor.schema, self.reference.extract(response))
        return self.next_(
            self.action_with(
                type=self.descriptor.success_type,
                payload=payload,
                meta=self.descriptor.meta,
            )
        )

    def fail(self, error: BaseException) -> None:
        self.reporter.report(error, self.context())
        self.next_(self.action_with(type=self.descriptor.failure_type, meta=error))

    def context(self) -> ErrorContext:
        return ErrorContext(
            failure_type=self.descriptor.failure_type,
            method=self.descriptor.query.method,
            reference=self.reference.describe(),
            meta=self.descriptor.meta,
        )

    async def run(self, operation: Operation) -> Any:
        """Await the one-shot store call, then dispatch its outcome."""
        try:
            response = await self.reference.execute(operation)
        except Exception as error:
            self.fail(error)
            raise
        return self.succeed(response)


class StoreCallMiddleware:
    """Middleware turning marked actions into document-store calls.

    Holds no per-invocation state; every marked action is validated,
    compiled and executed independently.

    Args:
        store: Root store handle (``collection(name)``), e.g. MemoryStore.
        marker: Action key carrying the descriptor. Overrides settings.
        reporter: Failure sink. Defaults to WarningReporter, or NullReporter
            when ``settings.report_failures`` is False.
        settings: Middleware settings. Defaults to ``MiddlewareSettings()``.
    """

    def __init__(
        self,
        store: Any,
        marker: str | None = None,
        reporter: ErrorReporter | None = None,
        settings: MiddlewareSettings | None = None,
    ) -> None:
        self.settings = settings or MiddlewareSettings()
        self.marker = marker or self.settings.marker
        if reporter is None:
            reporter = WarningReporter() if self.settings.report_failures else NullReporter()
        self.reporter = reporter
        self._build_query = make_query_builder(store)

    def __call__(self, host: HostStore) -> Callable[[Dispatch], Dispatch]:
        def wrap(next_: Dispatch) -> Dispatch:
            def dispatch(action: Action) -> Any:
                return self.handle(host, next_, action)

            return dispatch

        return wrap

    def handle(self, host: HostStore, next_: Dispatch, action: Action) -> Any:
        """Process one action.

        Returns:
            ``next_(action)`` for unmarked actions; the store's subscription
            handle for onSnapshot; otherwise an awaitable resolving to the
            result of dispatching the success action (or to None on bailout).

        Raises:
            ConfigValidationError: If the descriptor is invalid.
        """
        config = action.get(self.marker) if isinstance(action, Mapping) else None
        if config is None:
            return next_(action)

        descriptor = validate_config(config, default_key=self.settings.default_key)

        if descriptor.bailout is not None and descriptor.bailout(host.get_state()):
            return _schedule(_resolved(None))

        next_(
            _action_with(
                action,
                self.marker,
                type=descriptor.request_type,
                payload=descriptor.payload,
                meta=descriptor.meta,
            )
        )
        invocation = _Invocation(
            marker=self.marker,
            descriptor=descriptor,
            action=action,
            next_=next_,
            reporter=self.reporter,
            reference=self._build_query(descriptor.query),
        )

        operation = descriptor.query.operation
        if isinstance(operation, Subscribe):
            return invocation.reference.on_snapshot(invocation.succeed, invocation.fail)
        return _schedule(invocation.run(operation))


def create_middleware(
    store: Any,
    *,
    marker: str | None = None,
    reporter: ErrorReporter | None = None,
    settings: MiddlewareSettings | None = None,
) -> StoreCallMiddleware:
    """Create the middleware for a store root handle.

    Usage:
        middleware = create_middleware(MemoryStore(), marker="CALL_FIRESTORE")
        dispatch = middleware(host)(next_)
    """
    return StoreCallMiddleware(store, marker=marker, reporter=reporter, settings=settings)
