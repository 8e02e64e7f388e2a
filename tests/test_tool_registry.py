import pytest
from pydantic import BaseModel

from investai.application.services.tool_registry import ToolRegistry, ToolRegistryBuilder
from investai.domain.entities.tool_spec import CallableTool, TerminalTool
from investai.domain.errors import ToolRegistrationError
from investai.infrastructure.entrypoints.tool_registry import (
    AnswerInput,
    HistoricalPricesInput,
    create_tool_registry,
)


class _Echo(BaseModel):
    text: str


def _echo(text: str) -> str:
    return text


class TestToolRegistryBuilder:
    def test_register_without_invoke_creates_terminal_tool(self):
        registry = (
            ToolRegistryBuilder()
            .register("echo", "Echo text", _Echo, _echo)
            .register("done", "Finish", _Echo)
            .build()
        )
        assert isinstance(registry.lookup("echo"), CallableTool)
        assert isinstance(registry.lookup("done"), TerminalTool)
        assert registry.terminal.name == "done"
        assert len(registry) == 2
        assert "echo" in registry

    def test_lookup_missing_returns_none(self):
        registry = ToolRegistryBuilder().register("done", "Finish", _Echo).build()
        assert registry.lookup("nonexistent") is None
        assert "nonexistent" not in registry

    def test_duplicate_name_rejected(self):
        builder = ToolRegistryBuilder().register("echo", "Echo text", _Echo, _echo)
        with pytest.raises(ToolRegistrationError, match="already registered"):
            builder.register("echo", "Echo again", _Echo, _echo)

    def test_registry_rejects_duplicate_names_passed_directly(self):
        with pytest.raises(ToolRegistrationError, match="already registered"):
            ToolRegistry([
                CallableTool("echo", "Echo text", _Echo, _echo),
                CallableTool("echo", "Echo again", _Echo, _echo),
                TerminalTool("done", "Finish", _Echo),
            ])

    def test_blank_name_rejected(self):
        with pytest.raises(ToolRegistrationError):
            ToolRegistryBuilder().register("  ", "Blank", _Echo, _echo)

    def test_registry_requires_a_terminal_tool(self):
        with pytest.raises(ToolRegistrationError, match="found 0"):
            ToolRegistryBuilder().register("echo", "Echo text", _Echo, _echo).build()

    def test_registry_rejects_two_terminal_tools(self):
        with pytest.raises(ToolRegistrationError, match="found 2"):
            ToolRegistry([TerminalTool("a", "A", _Echo), TerminalTool("b", "B", _Echo)])

    def test_built_registry_is_read_only(self):
        registry = ToolRegistryBuilder().register("done", "Finish", _Echo).build()
        assert not hasattr(registry, "register")
        with pytest.raises(TypeError):
            registry._specs["extra"] = TerminalTool("extra", "x", _Echo)


class TestStockToolRegistry:
    def test_exposes_the_four_stock_tools(self, provider):
        registry = create_tool_registry(provider)
        assert [spec.name for spec in registry] == [
            "historicalprices",
            "stock_search",
            "stock_insights",
            "answer",
        ]
        assert registry.terminal.name == "answer"
        assert registry.lookup("historicalprices").input_schema is HistoricalPricesInput
        assert registry.terminal.input_schema is AnswerInput

    def test_historicalprices_calls_provider_with_start_date(self, provider):
        spec = create_tool_registry(provider).lookup("historicalprices")
        output = spec.invoke(query=" aapl ", histqueryOptions="2024-01-01")
        assert provider.calls == [("historical", "AAPL", "2024-01-01")]
        assert output["symbol"] == "AAPL"
        assert output["records"][0]["close"] == 185.64

    def test_stock_search_keeps_company_name_casing(self, provider):
        spec = create_tool_registry(provider).lookup("stock_search")
        output = spec.invoke(searchquery="Apple")
        assert provider.calls == [("search", "Apple")]
        assert output["quotes"][0]["symbol"] == "AAPL"

    def test_stock_insights_uppercases_symbol(self, provider):
        spec = create_tool_registry(provider).lookup("stock_insights")
        output = spec.invoke(stock="msft")
        assert provider.calls == [("insights", "MSFT")]
        assert output["recommendation"] == "buy"

    def test_answer_schema_requires_steps_and_answer(self):
        parsed = AnswerInput.model_validate(
            {"steps": [{"calculation": "1 + 1", "reasoning": "sum"}], "answer": "2"}
        )
        assert parsed.steps[0].calculation == "1 + 1"
        with pytest.raises(ValueError):
            AnswerInput.model_validate({"answer": "2"})

    def test_schemas_reject_unexpected_fields(self):
        with pytest.raises(ValueError):
            HistoricalPricesInput.model_validate(
                {"query": "AAPL", "histqueryOptions": "2024-01-01", "interval": "1wk"}
            )
