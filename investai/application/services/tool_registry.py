"""
Application service: the fixed registry of tools offered to the language model.

The registry is assembled once at startup through ToolRegistryBuilder and is
read-only afterwards, so it can be shared by concurrent requests.
Exactly one terminal tool must be registered.
"""

from types import MappingProxyType
from typing import Any, Callable, Iterator, Optional

from investai.domain.entities.tool_spec import CallableTool, TerminalTool, ToolSpec
from investai.domain.errors import ToolRegistrationError


class ToolRegistry:
    def __init__(self, specs: list[ToolSpec]) -> None:
        terminals = [s for s in specs if isinstance(s, TerminalTool)]
        if len(terminals) != 1:
            raise ToolRegistrationError(
                f"Expected exactly one terminal tool, found {len(terminals)}."
            )
        by_name: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in by_name:
                raise ToolRegistrationError(f"Tool {spec.name!r} is already registered.")
            by_name[spec.name] = spec
        self._specs = MappingProxyType(by_name)
        self._terminal = terminals[0]

    def lookup(self, name: str) -> Optional[ToolSpec]:
        return self._specs.get(name)

    @property
    def terminal(self) -> TerminalTool:
        return self._terminal

    @property
    def specs(self) -> list[ToolSpec]:
        return list(self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


class ToolRegistryBuilder:
    def __init__(self) -> None:
        self._specs: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        input_schema: type,
        invoke: Optional[Callable[..., Any]] = None,
    ) -> "ToolRegistryBuilder":
        """Add a tool. Omitting *invoke* registers the terminal tool.

        Raises:
            ToolRegistrationError: if *name* is blank or already registered.
        """
        if not name or not name.strip():
            raise ToolRegistrationError("tool name must be a non-empty string")
        if name in self._specs:
            raise ToolRegistrationError(f"Tool {name!r} is already registered.")
        if invoke is None:
            spec: ToolSpec = TerminalTool(name, description, input_schema)
        else:
            spec = CallableTool(name, description, input_schema, invoke)
        self._specs[name] = spec
        return self

    def build(self) -> ToolRegistry:
        return ToolRegistry(list(self._specs.values()))
