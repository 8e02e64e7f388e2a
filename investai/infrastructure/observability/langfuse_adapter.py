"""
Infrastructure adapter: Langfuse → IObservabilityHandler.

Langfuse is imported lazily so the module loads without the LANGFUSE_* variables
(tests, local runs without tracing). from_env() returns None in that case and
the agent runs untraced.
"""

import logging
import os
from typing import Any, Optional

from investai.domain.ports.observability_port import IObservabilityHandler

logger = logging.getLogger(__name__)


class LangfuseObservabilityHandler(IObservabilityHandler):
    """Wraps the Langfuse LangChain CallbackHandler."""

    def __init__(self) -> None:
        from langfuse.langchain import CallbackHandler
        self._handler = CallbackHandler()

    @classmethod
    def from_env(cls) -> Optional["LangfuseObservabilityHandler"]:
        if not (os.environ.get("LANGFUSE_PUBLIC_KEY") and os.environ.get("LANGFUSE_SECRET_KEY")):
            logger.info("Langfuse keys not set; tracing disabled")
            return None
        return cls()

    def as_callback(self) -> Any:
        return self._handler

    def flush(self) -> None:
        from langfuse import get_client
        get_client().flush()
