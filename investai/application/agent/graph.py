"""
LangGraph tool-calling agent graph factory.

Dependency-injection contract:
  - Receives ILanguageModel and an immutable ToolRegistry.
  - Never imports langchain_aws, yfinance, pydantic, or boto3 directly.
  - langchain_core and langgraph are treated as orchestration-framework imports,
    acceptable in the application layer.

Round structure:
  llm_node  (AWAITING_MODEL)  — ask the model for exactly one decision.
  tool_node (EXECUTING_TOOL)  — run the requested data tools, spend one step.
Either node may move the state to DONE or FAILED, which routes to END.
"""

import asyncio
import logging
from typing import Any

from langchain_core.messages import AIMessage, SystemMessage, ToolMessage
from langgraph.graph import END, START, StateGraph

from investai.application.agent.prompts import BUDGET_EXHAUSTED_TEXT, SYSTEM_PROMPT
from investai.application.agent.state import AgentState, AgentStatus, StopReason
from investai.application.agent.transcript import encode_tool_output, message_text
from investai.application.services.tool_registry import ToolRegistry
from investai.domain.entities.tool_spec import CallableTool
from investai.domain.ports.llm_port import ILanguageModel

logger = logging.getLogger(__name__)

DEFAULT_TOOL_TIMEOUT = 30.0

_SKIPPED_RESULT = {"skipped": "final answer already given in this round"}


def build_agent_graph(
    llm: ILanguageModel,
    registry: ToolRegistry,
    tool_timeout: float = DEFAULT_TOOL_TIMEOUT,
):
    """Build and compile the agent graph.

    Args:
        llm:          ILanguageModel implementation — injected, no direct SDK reference.
        registry:     ToolRegistry from create_tool_registry(); must hold one terminal tool.
        tool_timeout: Seconds allowed for a single tool invocation.

    Returns:
        Compiled LangGraph CompiledStateGraph ready for ainvoke() calls. The
        initial state must provide ``messages`` and ``step_budget``.
    """
    llm_with_tools = llm.bind_tools(registry.specs, tool_choice="required")
    terminal = registry.terminal

    def fail(reason: StopReason, error: str, rounds: int) -> dict:
        logger.warning("agent round %d failed (%s): %s", rounds, reason.value, error)
        return {
            "status": AgentStatus.FAILED,
            "stop_reason": reason,
            "error": error,
            "rounds": rounds,
        }

    async def llm_node(state: AgentState) -> dict:
        """Decision step: call the model and classify the requested tool call(s)."""
        rounds = state.get("rounds", 0) + 1
        existing = state["messages"]
        if existing and isinstance(existing[0], SystemMessage):
            messages = existing
        else:
            messages = [SystemMessage(content=SYSTEM_PROMPT)] + existing

        logger.debug("agent round %d: invoking model with %d messages", rounds, len(messages))
        try:
            response = await llm_with_tools.ainvoke(messages)
        except Exception as exc:
            logger.exception("language model call failed")
            return fail(StopReason.MODEL_ERROR, f"Language model call failed: {exc}", rounds)

        tool_calls = getattr(response, "tool_calls", None) or []
        if not tool_calls:
            return fail(StopReason.NO_TOOL_CALL, "Model replied without choosing a tool.", rounds)

        for call in tool_calls:
            if call["name"] not in registry:
                return fail(StopReason.UNKNOWN_TOOL, f"Model requested unknown tool {call['name']!r}.", rounds)

        terminal_call = next((c for c in tool_calls if c["name"] == terminal.name), None)
        if terminal_call is not None:
            return finish(response, terminal_call, rounds)

        for call in tool_calls:
            try:
                registry.lookup(call["name"]).input_schema.model_validate(call["args"])
            except ValueError as exc:
                return fail(StopReason.INVALID_INPUT, f"Invalid input for {call['name']!r}: {exc}", rounds)

        logger.info("agent round %d: model requested %s", rounds, [c["name"] for c in tool_calls])
        return {
            "messages": [response],
            "status": AgentStatus.EXECUTING_TOOL,
            "rounds": rounds,
        }

    def finish(response: AIMessage, terminal_call: dict, rounds: int) -> dict:
        try:
            answer = terminal.input_schema.model_validate(terminal_call["args"])
        except ValueError as exc:
            return fail(StopReason.INVALID_INPUT, f"Invalid input for {terminal.name!r}: {exc}", rounds)

        # Every tool call gets a result so the transcript can be replayed as history.
        closing = [
            ToolMessage(
                content=answer.answer if call is terminal_call else encode_tool_output(_SKIPPED_RESULT),
                tool_call_id=call["id"],
                name=call["name"],
            )
            for call in response.tool_calls
        ]
        logger.info("agent round %d: final answer given", rounds)
        return {
            "messages": [response, *closing],
            "status": AgentStatus.DONE,
            "stop_reason": StopReason.ANSWERED,
            "final_text": answer.answer,
            "steps": [step.model_dump() for step in answer.steps],
            "rounds": rounds,
        }

    async def tool_node(state: AgentState) -> dict:
        """Action step: run every tool call requested by the last model message."""
        last_message = state["messages"][-1]
        results: list[ToolMessage] = []
        for tool_call in last_message.tool_calls:
            output = await run_tool(tool_call)
            results.append(
                ToolMessage(
                    content=encode_tool_output(output),
                    tool_call_id=tool_call["id"],
                    name=tool_call["name"],
                )
            )

        budget = state["step_budget"] - 1
        update: dict = {"messages": results, "step_budget": budget}
        if budget > 0:
            update["status"] = AgentStatus.AWAITING_MODEL
        else:
            logger.info("agent stopped: step budget exhausted after %d rounds", state.get("rounds", 0))
            update.update(
                status=AgentStatus.DONE,
                stop_reason=StopReason.BUDGET_EXHAUSTED,
                final_text=message_text(last_message) or BUDGET_EXHAUSTED_TEXT,
            )
        return update

    async def run_tool(tool_call: dict) -> Any:
        spec = registry.lookup(tool_call["name"])
        if not isinstance(spec, CallableTool):
            return {"error": f"Tool {tool_call['name']!r} cannot be executed."}
        args = spec.input_schema.model_validate(tool_call["args"]).model_dump()
        try:
            return await asyncio.wait_for(asyncio.to_thread(spec.invoke, **args), timeout=tool_timeout)
        except asyncio.TimeoutError:
            logger.warning("tool %s timed out after %ss", spec.name, tool_timeout)
            return {"error": f"Tool {spec.name!r} timed out after {tool_timeout} seconds."}
        except Exception as exc:
            logger.warning("tool %s failed: %s", spec.name, exc)
            return {"error": str(exc)}

    def route_after_llm(state: AgentState) -> str:
        """Route: a pending data tool call goes to tool_node; DONE or FAILED ends."""
        if state["status"] == AgentStatus.EXECUTING_TOOL:
            return "tool_node"
        return END

    def route_after_tool(state: AgentState) -> str:
        if state["status"] == AgentStatus.DONE:
            return END
        return "llm_node"

    workflow = StateGraph(AgentState)
    workflow.add_node("llm_node", llm_node)
    workflow.add_node("tool_node", tool_node)
    workflow.add_edge(START, "llm_node")
    workflow.add_conditional_edges("llm_node", route_after_llm, ["tool_node", END])
    workflow.add_conditional_edges("tool_node", route_after_tool, ["llm_node", END])
    return workflow.compile()


def recursion_limit_for(max_steps: int) -> int:
    """LangGraph superstep ceiling: two nodes per round plus headroom."""
    return 2 * max_steps + 2


