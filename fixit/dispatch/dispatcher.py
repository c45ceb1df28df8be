# FILE: fixit/dispatch/dispatcher.py
"""
Dispatcher: the single entry point from the API layer.

    execute(request_text, connection) -> ExecutionOutcome

Order per request (never reordered):
    1. Safety Gate            denied -> terminal, registry never consulted
    2. Intent Resolver        never fails; unknown intent on any error
    3. Registry find          description substring match on the request
    4. (miss) Generate        terminal on failure
       -> Register
    5. Invoke                 connection, platform and schema checks, timeout
       -> record_outcome
    6. Audit append           exactly once, in all branches

Every error below this boundary is turned into ExecutionOutcome.error.
execute() only raises CancelledError, after the record is written.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from fixit.audit.schemas import ExecutionRecordCreate
from fixit.audit.service import AuditLog
from fixit.capabilities.generator import CapabilityGenerator
from fixit.capabilities.registry import CapabilityRegistry
from fixit.capabilities.schemas import CapabilityOut
from fixit.capabilities.validation import validate_params
from fixit.connections.schemas import ConnectionRef
from fixit.dispatch.errors import (
    DispatchError,
    GenerationFailed,
    InvocationFailed,
    PolicyDenied,
)
from fixit.intent.resolver import IntentResolver
from fixit.intent.schemas import Intent
from fixit.platforms import client_for
from fixit.safety.gate import SafetyGate

logger = logging.getLogger(__name__)

DEFAULT_INVOKE_TIMEOUT_S = 10.0


class _BudgetExpired(Exception):
    pass


@dataclass
class ExecutionOutcome:
    success: bool
    status: str  # success | failed | denied
    output: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    capability_name: Optional[str] = None
    duration_ms: int = 0
    intent: Optional[Dict[str, Any]] = None
    record_id: Optional[int] = None

    @classmethod
    def from_error(cls, err: DispatchError) -> "ExecutionOutcome":
        return cls(
            success=False,
            status="denied" if isinstance(err, PolicyDenied) else "failed",
            error=err.message,
            error_kind=err.kind,
            capability_name=err.capability_name,
        )


@dataclass
class _Trace:
    """What the audit record needs to know about how far the request got."""
    intent: Optional[Intent] = None
    params: Dict[str, Any] = field(default_factory=dict)


def build_params(intent: Optional[Intent]) -> Dict[str, Any]:
    if intent is None:
        return {}
    params = dict(intent.parameters)
    if intent.target and "target" not in params:
        params["target"] = intent.target
    return params


class Dispatcher:
    def __init__(
        self,
        *,
        safety_gate: SafetyGate,
        resolver: IntentResolver,
        registry: CapabilityRegistry,
        generator: CapabilityGenerator,
        audit_log: AuditLog,
        client_factory: Callable[..., Any] = client_for,
        invoke_timeout_s: float = DEFAULT_INVOKE_TIMEOUT_S,
    ):
        self.safety_gate = safety_gate
        self.resolver = resolver
        self.registry = registry
        self.generator = generator
        self.audit_log = audit_log
        self.client_factory = client_factory
        self.invoke_timeout_s = invoke_timeout_s

    async def execute(self, request_text: str, connection: Optional[ConnectionRef]) -> ExecutionOutcome:
        started = time.perf_counter()
        trace = _Trace()
        outcome: Optional[ExecutionOutcome] = None

        try:
            try:
                outcome = await self._dispatch(request_text, connection, trace)
            except DispatchError as e:
                outcome = ExecutionOutcome.from_error(e)
            except Exception as e:
                logger.exception("[dispatcher] unexpected error for %r: %s", request_text, e)
                outcome = ExecutionOutcome(
                    success=False,
                    status="failed",
                    error=str(e) or type(e).__name__,
                    error_kind="internal_error",
                )
            return outcome
        finally:
            if outcome is None:
                # cancelled mid-flight; still leave a record behind
                outcome = ExecutionOutcome(
                    success=False, status="failed", error="dispatch cancelled", error_kind="cancelled"
                )
            outcome.duration_ms = int((time.perf_counter() - started) * 1000)
            outcome.intent = trace.intent.snapshot() if trace.intent is not None else None
            outcome.record_id = await self._append_record(request_text, connection, outcome, trace)
            logger.info(
                "[dispatcher] %s capability=%s status=%s %dms",
                request_text[:80],
                outcome.capability_name or "none",
                outcome.status,
                outcome.duration_ms,
            )

    async def _dispatch(
        self, request_text: str, connection: Optional[ConnectionRef], trace: _Trace
    ) -> ExecutionOutcome:
        decision = self.safety_gate.check(request_text)
        if not decision.allowed:
            raise PolicyDenied(decision.reason or "request denied by safety policy")

        trace.intent = await self.resolver.resolve(request_text)
        trace.params = build_params(trace.intent)

        capability = await asyncio.to_thread(self.registry.find, request_text)
        if capability is None:
            logger.info("[dispatcher] no capability matches %r, generating", request_text)
            capability = await self._generate_and_register(request_text, trace.intent, connection)

        return await self._invoke(capability, connection, trace.params)

    async def _generate_and_register(
        self, request_text: str, intent: Intent, connection: Optional[ConnectionRef]
    ) -> CapabilityOut:
        try:
            spec = await self.generator.generate(request_text, intent, connection)
        except GenerationFailed:
            raise
        except Exception as e:
            raise GenerationFailed(f"capability generation failed: {e}") from e
        return await asyncio.to_thread(self.registry.register, spec)

    async def _invoke(
        self,
        capability: CapabilityOut,
        connection: Optional[ConnectionRef],
        params: Dict[str, Any],
    ) -> ExecutionOutcome:
        name = capability.name
        error = self._precheck(capability, connection, params)

        output: Any = None
        if error is None:
            handler = self.registry.handler_for(capability)
            try:
                client = self.client_factory(connection, timeout_s=self.invoke_timeout_s)
                output = await self._run_with_budget(handler.fn(client, params))
            except _BudgetExpired:
                error = f"handler timed out after {self.invoke_timeout_s:g}s"
            except Exception as e:
                logger.warning("[dispatcher] %s handler error: %s", name, e)
                error = str(e) or type(e).__name__
            else:
                error = _reported_error(output)

        await asyncio.to_thread(self.registry.record_outcome, name, error is None)

        if error is not None:
            raise InvocationFailed(error, capability_name=name)
        return ExecutionOutcome(success=True, status="success", output=output, capability_name=name)

    async def _run_with_budget(self, call) -> Any:
        """Await `call` for at most invoke_timeout_s.

        Only the budget running out raises _BudgetExpired; a TimeoutError
        raised by the handler itself propagates as the handler's own error.
        """
        task = asyncio.ensure_future(call)
        try:
            done, _ = await asyncio.wait({task}, timeout=self.invoke_timeout_s)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if not done:
            task.cancel()
            raise _BudgetExpired()
        return task.result()

    def _precheck(
        self,
        capability: CapabilityOut,
        connection: Optional[ConnectionRef],
        params: Dict[str, Any],
    ) -> Optional[str]:
        handler = self.registry.handler_for(capability)
        if handler is None:
            return f"capability not implemented: {capability.operation}"
        if connection is None:
            return "no store connection given"
        if connection.store_type not in handler.platforms:
            return f"operation '{capability.operation}' is not supported by {connection.store_type}"

        schema = capability.parameter_schema or handler.parameter_schema
        violations = validate_params(schema, params)
        if violations:
            return "invalid parameters: " + "; ".join(violations)
        return None

    async def _append_record(
        self,
        request_text: str,
        connection: Optional[ConnectionRef],
        outcome: ExecutionOutcome,
        trace: _Trace,
    ) -> Optional[int]:
        return await asyncio.to_thread(
            self.audit_log.append,
            ExecutionRecordCreate(
                capability_name=outcome.capability_name or "none",
                status=outcome.status,
                success=outcome.success,
                request_text=request_text,
                connection_id=connection.id if connection is not None else None,
                input_snapshot={"request": request_text, "parameters": trace.params},
                output_snapshot=outcome.output,
                intent_snapshot=outcome.intent,
                error_message=outcome.error,
                error_kind=outcome.error_kind,
                duration_ms=outcome.duration_ms,
            ),
        )


def _reported_error(output: Any) -> Optional[str]:
    """Handlers report a handled failure as {"success": False, "error"/"message": ...}."""
    if isinstance(output, dict) and output.get("success") is False:
        return str(output.get("error") or output.get("message") or "handler reported failure")
    return None


def build_dispatcher(database, settings=None) -> Dispatcher:
    """Wire the default collaborators (OpenAI generation, policy file, live platform clients)."""
    from fixit.capabilities.generator import LLMCapabilityGenerator
    from fixit.config import load_settings
    from fixit.llm.generation import OpenAIGenerationService
    from fixit.safety.gate import load_policy

    settings = settings or load_settings()
    generation = OpenAIGenerationService(settings=settings)
    return Dispatcher(
        safety_gate=SafetyGate(load_policy(settings.safety_policy_path)),
        resolver=IntentResolver(generation),
        registry=CapabilityRegistry(database),
        generator=LLMCapabilityGenerator(generation),
        audit_log=AuditLog(database, max_limit=settings.audit_query_max),
        client_factory=client_for,
        invoke_timeout_s=settings.invoke_timeout_s,
    )
