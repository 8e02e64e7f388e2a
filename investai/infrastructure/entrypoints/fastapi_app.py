"""
FastAPI entry point.

create_app() is the Composition Root: with no arguments it wires all
infrastructure adapters from environment variables and passes them to the
application layer. Tests inject a RunAgentUseCase built on stub ports.

Run locally:
    uvicorn investai.infrastructure.entrypoints.fastapi_app:create_app --factory --reload --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Literal, Optional, Union

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from investai.application.agent.graph import DEFAULT_TOOL_TIMEOUT, build_agent_graph
from investai.application.agent.prompts import FAILURE_TEXT
from investai.application.agent.transcript import history_from_wire, history_to_wire
from investai.application.use_cases.run_agent import DEFAULT_MAX_STEPS, AgentResult, RunAgentUseCase
from investai.domain.errors import ConfigurationError
from investai.domain.ports.observability_port import IObservabilityHandler

logger = logging.getLogger(__name__)


class WireMessage(BaseModel):
    role: Literal["system", "user", "assistant", "tool"]
    content: Union[str, list[dict[str, Any]]]


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    conversationHistory: list[WireMessage] = Field(default_factory=list)


def _response_body(result: AgentResult) -> dict:
    return {
        "response": {
            "finalText": result.final_text,
            "steps": [
                {"calculation": s.calculation, "reasoning": s.reasoning}
                for s in result.steps
            ],
            "status": result.status.value,
            "stopReason": result.stop_reason.value if result.stop_reason else None,
            "rounds": result.rounds,
            "rawTranscriptMessages": history_to_wire(result.new_messages),
        },
        "conversationHistory": history_to_wire(result.transcript),
    }


def build_run_use_case() -> tuple[RunAgentUseCase, Optional[IObservabilityHandler]]:
    """Wire the production adapters from environment variables."""
    from investai.infrastructure.entrypoints.tool_registry import create_tool_registry
    from investai.infrastructure.llm.bedrock_adapter import BedrockChatAdapter
    from investai.infrastructure.observability.langfuse_adapter import LangfuseObservabilityHandler
    from investai.infrastructure.stock_data.yfinance_adapter import YFinanceFinancialDataProvider

    max_steps = int(os.environ.get("AGENT_MAX_STEPS", DEFAULT_MAX_STEPS))
    tool_timeout = float(os.environ.get("TOOL_TIMEOUT_SECONDS", DEFAULT_TOOL_TIMEOUT))

    llm = BedrockChatAdapter()
    registry = create_tool_registry(YFinanceFinancialDataProvider(timeout=tool_timeout))
    graph = build_agent_graph(llm, registry, tool_timeout=tool_timeout)
    observability = LangfuseObservabilityHandler.from_env()
    return RunAgentUseCase(graph, llm, observability, max_steps=max_steps), observability


def create_app(
    run_use_case: Optional[RunAgentUseCase] = None,
    observability: Optional[IObservabilityHandler] = None,
) -> FastAPI:
    if run_use_case is None:
        load_dotenv()
        logging.basicConfig(
            level=os.environ.get("LOG_LEVEL", "INFO"),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        run_use_case, observability = build_run_use_case()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        if observability is not None:
            observability.flush()

    app = FastAPI(title="InvestAI Stock Assistant API", lifespan=lifespan)

    @app.post("/api/chat")
    async def chat(body: ChatRequest):
        """Answer one message and return the updated conversation history."""
        try:
            history = history_from_wire(m.model_dump() for m in body.conversationHistory)
        except ValueError as exc:
            return JSONResponse(status_code=422, content={"error": f"Invalid conversation history: {exc}"})

        try:
            result = await run_use_case.execute(body.message, history)
            if not result.succeeded:
                logger.error("agent run failed (%s): %s", result.stop_reason, result.error)
                return JSONResponse(status_code=500, content={"error": FAILURE_TEXT})
            # Rendered inside the try: serialisation errors get the failure body.
            return JSONResponse(content=_response_body(result))
        except ConfigurationError as exc:
            logger.error("configuration error: %s", exc)
            return JSONResponse(status_code=500, content={"error": str(exc)})
        except Exception:
            logger.exception("Error processing chat")
            return JSONResponse(status_code=500, content={"error": FAILURE_TEXT})

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
