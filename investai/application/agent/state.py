"""
LangGraph agent state definition.
langgraph is the orchestration framework and is allowed in the application layer.
"""

from enum import Enum
from typing import Annotated, Optional, TypedDict

from langgraph.graph.message import add_messages


class AgentStatus(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOL = "executing_tool"
    DONE = "done"
    FAILED = "failed"


class StopReason(str, Enum):
    ANSWERED = "answered"
    BUDGET_EXHAUSTED = "budget_exhausted"
    UNKNOWN_TOOL = "unknown_tool"
    INVALID_INPUT = "invalid_input"
    NO_TOOL_CALL = "no_tool_call"
    MODEL_ERROR = "model_error"


class AgentState(TypedDict, total=False):
    """Shared state threaded through every node in the agent graph.

    messages:    append-only transcript of LangChain BaseMessage objects managed by
                 the add_messages reducer (assigns ids, preserves order).
    step_budget: tool rounds left before the loop is force-stopped.
    rounds:      number of model invocations made so far.
    status:      current AgentStatus; DONE and FAILED are terminal.
    stop_reason: StopReason once status is terminal.
    final_text:  answer text, fallback text, or failure explanation.
    steps:       derivation trail carried by the terminal answer call.
    error:       detail of the failure when status is FAILED.
    """

    messages: Annotated[list, add_messages]
    step_budget: int
    rounds: int
    status: AgentStatus
    stop_reason: Optional[StopReason]
    final_text: str
    steps: list[dict]
    error: Optional[str]
