"""
Use-case: answer one chat message through the compiled LangGraph agent.
langchain_core.messages is treated as framework (not infrastructure) because
LangGraph is the orchestration framework used throughout the application layer.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from investai.application.agent.graph import recursion_limit_for
from investai.application.agent.prompts import FAILURE_TEXT, SYSTEM_PROMPT
from investai.application.agent.state import AgentStatus, StopReason
from investai.domain.entities.tool_spec import DerivationStep
from investai.domain.ports.llm_port import ILanguageModel
from investai.domain.ports.observability_port import IObservabilityHandler

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 5


@dataclass
class AgentResult:
    """Outcome of one agent run.

    transcript is the full message list (system prompt, prior history, user
    message, generated messages); new_messages is only what this run appended.
    """

    status: AgentStatus
    stop_reason: Optional[StopReason]
    final_text: str
    steps: list[DerivationStep] = field(default_factory=list)
    new_messages: list[BaseMessage] = field(default_factory=list)
    transcript: list[BaseMessage] = field(default_factory=list)
    rounds: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == AgentStatus.DONE


class RunAgentUseCase:
    def __init__(
        self,
        graph: Any,
        llm: ILanguageModel,
        observability: Optional[IObservabilityHandler] = None,
        max_steps: int = DEFAULT_MAX_STEPS,
    ) -> None:
        """
        Args:
            graph:         Compiled LangGraph StateGraph returned by build_agent_graph().
            llm:           The ILanguageModel the graph was built with; used for the
                           credential pre-flight check.
            observability: IObservabilityHandler implementation (e.g. Langfuse adapter),
                           or None to run untraced.
            max_steps:     Step budget: the most tool rounds a single request may use.
        """
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self._graph = graph
        self._llm = llm
        self._observability = observability
        self._max_steps = max_steps

    async def execute(
        self,
        message: str,
        history: Optional[list[BaseMessage]] = None,
        session_id: Optional[str] = None,
    ) -> AgentResult:
        """Run the agent loop for a user *message* on top of prior *history*.

        System messages in *history* are replaced by the current system prompt.

        Raises:
            ConfigurationError: if the model credentials are missing; no round is run.
        """
        self._llm.ensure_credentials()

        prior = [m for m in (history or []) if not isinstance(m, SystemMessage)]
        initial = [SystemMessage(content=SYSTEM_PROMPT), *prior, HumanMessage(content=message)]

        config: dict = {"recursion_limit": recursion_limit_for(self._max_steps)}
        if self._observability is not None:
            config["callbacks"] = [self._observability.as_callback()]
            config["metadata"] = {
                "langfuse_session_id": session_id,
                "langfuse_tags": ["stock-agent"],
            }

        final = await self._graph.ainvoke(
            {
                "messages": initial,
                "step_budget": self._max_steps,
                "rounds": 0,
                "status": AgentStatus.AWAITING_MODEL,
            },
            config=config,
        )

        transcript = list(final["messages"])
        status = final["status"]
        result = AgentResult(
            status=status,
            stop_reason=final.get("stop_reason"),
            final_text=final.get("final_text") or (FAILURE_TEXT if status == AgentStatus.FAILED else ""),
            steps=[DerivationStep(**step) for step in final.get("steps") or []],
            new_messages=transcript[len(initial):],
            transcript=transcript,
            rounds=final.get("rounds", 0),
            error=final.get("error"),
        )
        logger.info(
            "agent run finished status=%s reason=%s rounds=%d",
            result.status.value,
            result.stop_reason.value if result.stop_reason else None,
            result.rounds,
        )
        return result
