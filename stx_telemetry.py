"""
Best-effort usage telemetry and timing helpers.

Telemetry never raises to its caller: recording failures are swallowed and
logged only in debug mode. Events go to a pluggable sink; the default sink
writes them to the debug log.
"""

from __future__ import annotations

import inspect
import json
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Literal, Protocol, TypeVar

from stx_config import debug_logs_enabled, telemetry_enabled
from stx_errors import TimerNotStartedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TelemetryNetwork = Literal["mainnet", "testnet", "devnet"]


@dataclass
class TelemetryEvent:
    action: str
    network: TelemetryNetwork | None = None
    contract_address: str | None = None
    duration: float | None = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


@dataclass
class RequestContext:
    user_id: str | None = None
    session_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_agent: str | None = None
    ip: str | None = None


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


class TelemetrySink(Protocol):
    """Receives telemetry payloads. emit() may be sync or async."""

    def emit(self, payload: dict[str, Any]) -> Any: ...


class LoggingTelemetrySink:
    """Writes events to the debug log when debug output is enabled."""

    def emit(self, payload: dict[str, Any]) -> None:
        if debug_logs_enabled():
            logger.debug("Telemetry event: %s", json.dumps(payload, default=str))


_sink: TelemetrySink = LoggingTelemetrySink()


def set_telemetry_sink(sink: TelemetrySink) -> TelemetrySink:
    """Install a sink and return the previous one."""
    global _sink
    previous, _sink = _sink, sink
    return previous


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------


def _build_payload(event: TelemetryEvent, context: RequestContext | None) -> dict[str, Any]:
    # Wallet addresses and keys never go into the payload.
    metadata = dict(event.metadata or {})
    if context is not None:
        metadata["user_agent"] = context.user_agent
        metadata["session_id"] = context.session_id
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": event.action,
        "network": event.network,
        "contract_address": event.contract_address,
        "duration": event.duration,
        "success": not event.error,
        "error": event.error,
        "metadata": metadata,
    }


async def record_telemetry(event: TelemetryEvent, context: RequestContext | None = None) -> None:
    """Record a telemetry event. Never raises."""
    if not telemetry_enabled():
        return

    try:
        result = _sink.emit(_build_payload(event, context))
        if inspect.isawaitable(result):
            await result
    except Exception as exc:  # noqa: BLE001
        if debug_logs_enabled():
            logger.warning("Telemetry recording failed: %s", exc)


async def _record_quietly(event: TelemetryEvent, context: RequestContext | None) -> None:
    try:
        await record_telemetry(event, context)
    except Exception as exc:  # noqa: BLE001
        if debug_logs_enabled():
            logger.warning("Telemetry recording failed: %s", exc)


async def with_telemetry(
    action: str,
    operation: Callable[[], Awaitable[T]],
    context: RequestContext | None = None,
) -> T:
    """
    Await operation() and record its duration and outcome.

    The operation's result is returned, or its exception re-raised, unchanged.
    """
    start = time.perf_counter()
    try:
        result = await operation()
    except Exception as exc:
        duration = (time.perf_counter() - start) * 1000
        await _record_quietly(
            TelemetryEvent(action=action, duration=duration, error=str(exc) or type(exc).__name__),
            context,
        )
        raise

    duration = (time.perf_counter() - start) * 1000
    await _record_quietly(TelemetryEvent(action=action, duration=duration), context)
    return result


# ---------------------------------------------------------------------------
# Timers
# ---------------------------------------------------------------------------


class PerformanceMonitor:
    """
    Process-wide named timers, in milliseconds.

    Starting a label twice restarts it; concurrent measurements need distinct labels.
    """

    _timers: ClassVar[dict[str, float]] = {}

    @classmethod
    def start(cls, label: str) -> None:
        cls._timers[label] = time.perf_counter()

    @classmethod
    def end(cls, label: str) -> float:
        try:
            started = cls._timers.pop(label)
        except KeyError:
            raise TimerNotStartedError(label) from None

        duration = (time.perf_counter() - started) * 1000
        if debug_logs_enabled():
            logger.debug("%s: %.1fms", label, duration)
        return duration

    @classmethod
    async def measure(cls, label: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Time operation() under label; the timer never changes its outcome."""
        cls.start(label)
        try:
            return await operation()
        finally:
            try:
                cls.end(label)
            except TimerNotStartedError as exc:
                logger.debug("Timer cleanup skipped: %s", exc)


# ---------------------------------------------------------------------------
# Usage analytics
# ---------------------------------------------------------------------------


class Analytics:
    """Named usage events for the tool server."""

    @staticmethod
    async def tool_used(tool_name: str, context: RequestContext | None = None) -> None:
        await record_telemetry(
            TelemetryEvent(action="tool_used", metadata={"tool_name": tool_name}), context
        )

    @staticmethod
    async def balance_checked(network: str, context: RequestContext | None = None) -> None:
        await record_telemetry(TelemetryEvent(action="balance_checked", network=network), context)

    @staticmethod
    async def read_only_function_called(
        network: str, contract_address: str, context: RequestContext | None = None
    ) -> None:
        await record_telemetry(
            TelemetryEvent(
                action="read_only_function_called",
                network=network,
                contract_address=contract_address,
            ),
            context,
        )

    @staticmethod
    async def sip010_balance_checked(
        network: str, contract_address: str, context: RequestContext | None = None
    ) -> None:
        await record_telemetry(
            TelemetryEvent(
                action="sip010_balance_checked",
                network=network,
                contract_address=contract_address,
            ),
            context,
        )

    @staticmethod
    async def error_occurred(action: str, error: str, context: RequestContext | None = None) -> None:
        await record_telemetry(TelemetryEvent(action=f"{action}_error", error=error), context)

    @staticmethod
    async def server_started(version: str | None = None) -> None:
        await record_telemetry(TelemetryEvent(action="server_started", metadata={"version": version}))

    @staticmethod
    async def server_shutdown() -> None:
        await record_telemetry(TelemetryEvent(action="server_shutdown"))
