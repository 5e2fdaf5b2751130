"""
Tests for the sample tool implementations.
"""

import random
from unittest.mock import Mock, patch

import pytest
import requests

from multistep.exceptions import ToolError
from multistep.models import RpgConfig, TavilyConfig, ToolsConfig
from multistep.rpg import Command, Game
from multistep.tools import (
    GameSession,
    build_add_tool,
    build_default_registry,
    build_get_constants_tool,
    build_number_guess_tool,
    build_read_docs_tool,
    build_rpg_tools,
    build_tavily_search_tool,
    search,
)


class TestConstantsTool:
    """Tests for get_constants."""

    def test_returns_configured_values(self):
        """The handler returns the X/Y pair it was built with."""
        tool = build_get_constants_tool(3, 4)

        assert tool.name == "get_constants"
        assert tool.execute({}) == {"X": 3, "Y": 4}

    def test_ignores_arguments(self):
        """Arguments are not needed and are ignored."""
        tool = build_get_constants_tool(3, 4)

        assert tool.execute({"anything": True}) == {"X": 3, "Y": 4}


class TestAddTool:
    """Tests for add."""

    def test_adds_integers(self):
        tool = build_add_tool()

        assert tool.execute({"x": 2, "y": 40}) == {"sum": 42}

    def test_negative_numbers(self):
        tool = build_add_tool()

        assert tool.execute({"x": -5, "y": 3}) == {"sum": -2}

    def test_missing_parameter_raises(self):
        """A missing operand is a handler failure."""
        tool = build_add_tool()

        with pytest.raises(ToolError, match="'y'"):
            tool.execute({"x": 1})

    def test_non_integer_raises(self):
        """Strings, floats and booleans are rejected."""
        tool = build_add_tool()

        for bad in ("1", 1.5, True):
            with pytest.raises(ToolError):
                tool.execute({"x": bad, "y": 1})


class TestNumberGuessTool:
    """Tests for number_guess."""

    def test_low_high_correct(self):
        tool = build_number_guess_tool(target=42, max_value=100)

        assert tool.execute({"guess": 10}) == {"result": "low"}
        assert tool.execute({"guess": 90}) == {"result": "high"}
        assert tool.execute({"guess": 42}) == {"result": "correct"}

    def test_out_of_range(self):
        tool = build_number_guess_tool(target=42, max_value=100)

        assert tool.execute({"guess": 0}) == {"result": "out_of_range"}
        assert tool.execute({"guess": 101}) == {"result": "out_of_range"}

    def test_target_is_clamped(self):
        """A target above max is clamped to max."""
        tool = build_number_guess_tool(target=500, max_value=10)

        assert tool.execute({"guess": 10}) == {"result": "correct"}
        assert tool.parameters["properties"]["guess"]["maximum"] == 10

    def test_missing_guess_raises(self):
        tool = build_number_guess_tool(target=1, max_value=10)

        with pytest.raises(ToolError):
            tool.execute({})


class TestReadDocsTool:
    """Tests for read_docs_file."""

    def test_reads_allowed_file(self, tmp_path):
        (tmp_path / "test.md").write_text("# Testing\n", encoding="utf-8")
        tool = build_read_docs_tool(tmp_path, ["test.md"])

        result = tool.execute({"filename": "test.md"})

        assert result == {"filename": "test.md", "content": "# Testing\n"}

    def test_rejects_unlisted_file(self, tmp_path):
        (tmp_path / "secret.md").write_text("nope", encoding="utf-8")
        tool = build_read_docs_tool(tmp_path, ["test.md"])

        result = tool.execute({"filename": "secret.md"})

        assert result == {"error": "filename not allowed: secret.md"}

    def test_rejects_path_traversal(self, tmp_path):
        tool = build_read_docs_tool(tmp_path, ["test.md"])

        result = tool.execute({"filename": "../test.md"})

        assert "error" in result

    def test_missing_filename(self, tmp_path):
        tool = build_read_docs_tool(tmp_path, ["test.md"])

        assert tool.execute({}) == {"error": "filename is required"}

    def test_missing_file_reports_read_error(self, tmp_path):
        tool = build_read_docs_tool(tmp_path, ["test.md"])

        result = tool.execute({"filename": "test.md"})

        assert result["error"].startswith("read error:")

    def test_large_file_is_truncated(self, tmp_path):
        (tmp_path / "big.md").write_text("a" * 100, encoding="utf-8")
        tool = build_read_docs_tool(tmp_path, ["big.md"], max_bytes=10)

        result = tool.execute({"filename": "big.md"})

        assert result["content"] == "a" * 10
        assert result["truncated"] is True
        assert result["max_bytes"] == 10

    def test_schema_lists_allowed_files(self, tmp_path):
        tool = build_read_docs_tool(tmp_path, ["a.md", "b.md"])

        assert tool.parameters["properties"]["filename"]["enum"] == ["a.md", "b.md"]


class TestTavilySearch:
    """Tests for the Tavily search function and tool."""

    def test_empty_query_raises(self):
        with pytest.raises(ValueError, match="query is empty"):
            search("   ", api_key="key")

    def test_missing_api_key_raises(self):
        with pytest.raises(ValueError, match="TAVILY_API_KEY"):
            search("python", api_key="")

    @patch("multistep.tools.search.requests.post")
    def test_search_request_shape(self, mock_post):
        """Bearer auth, clamped max_results and timeout are sent."""
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.text = '{"results": []}'
        mock_response.json.return_value = {"results": []}
        mock_post.return_value = mock_response

        result = search(" python ", api_key="key", max_results=50, timeout=7)

        assert result == {"results": []}
        _, kwargs = mock_post.call_args
        assert kwargs["json"]["query"] == "python"
        assert kwargs["json"]["max_results"] == 10
        assert kwargs["headers"]["Authorization"] == "Bearer key"
        assert kwargs["timeout"] == 7
        mock_response.raise_for_status.assert_called_once()

    @patch("multistep.tools.search.requests.post")
    def test_non_json_body_returned_raw(self, mock_post):
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.text = "not json"
        mock_response.json.side_effect = ValueError("bad json")
        mock_post.return_value = mock_response

        assert search("python", api_key="key") == {"raw": "not json"}

    @patch("multistep.tools.search.requests.post")
    def test_tool_reports_transport_error(self, mock_post):
        """The tool turns request failures into an error payload."""
        mock_post.side_effect = requests.exceptions.ConnectionError("unreachable")
        tool = build_tavily_search_tool(api_key="key")

        result = tool.execute({"query": "python"})

        assert "unreachable" in result["error"]

    def test_tool_requires_query(self):
        tool = build_tavily_search_tool(api_key="key")

        assert tool.execute({"query": 5}) == {"error": "query is required string"}


class TestRpgTools:
    """Tests for the battle game tools bound to a session."""

    @pytest.fixture
    def session(self):
        return GameSession(Game(player_name="Tester", rng=random.Random(7)))

    @pytest.fixture
    def tools(self, session):
        return {tool.name: tool for tool in build_rpg_tools(session)}

    def test_tool_names(self, tools):
        assert set(tools) == {
            "rpg_get_rules",
            "rpg_get_state",
            "rpg_list_actions",
            "rpg_issue_action",
        }

    def test_get_rules(self, tools):
        rules = tools["rpg_get_rules"].execute({})

        assert rules["player_default_max_hp"] == 30
        assert [e["name"] for e in rules["enemy_templates"]] == ["Slime", "Goblin", "Wolf"]

    def test_get_state(self, tools):
        state = tools["rpg_get_state"].execute({})

        assert state["player"]["name"] == "Tester"
        assert state["turn"] in ("player", "enemy")
        assert state["battle_count"] == 1
        assert state["is_over"] is False

    def test_list_actions(self, tools):
        assert tools["rpg_list_actions"].execute({}) == {
            "actions": ["attack", "heal", "run", "quit"]
        }

    def test_heal_uses_potion(self, tools):
        result = tools["rpg_issue_action"].execute({"action": "heal"})

        assert result["continued"] is True
        assert result["snapshot"]["player"]["potions"] == 1
        assert any("potion" in line for line in result["log"])

    def test_heal_without_potions(self, session, tools):
        session._game.player.potions = 0

        result = tools["rpg_issue_action"].execute({"action": "heal"})

        assert "No potions left!" in result["log"]

    def test_attack_logs_damage(self, tools):
        result = tools["rpg_issue_action"].execute({"action": "attack"})

        assert result["log"][0].startswith("You hit the ")

    def test_quit_stops(self, tools):
        result = tools["rpg_issue_action"].execute({"action": "quit"})

        assert result["continued"] is False

    def test_invalid_action_raises(self, tools):
        with pytest.raises(ToolError, match="invalid action"):
            tools["rpg_issue_action"].execute({"action": "dance"})

    def test_sessions_are_independent(self):
        """Two sessions never share game state."""
        first = {t.name: t for t in build_rpg_tools(GameSession(Game(rng=random.Random(1))))}
        second = {t.name: t for t in build_rpg_tools(GameSession(Game(rng=random.Random(1))))}

        first["rpg_issue_action"].execute({"action": "heal"})

        assert second["rpg_get_state"].execute({})["player"]["potions"] == 2


class TestDefaultRegistry:
    """Tests for build_default_registry."""

    def test_standard_catalog(self):
        registry = build_default_registry(ToolsConfig())

        assert registry.names()[:4] == ["get_constants", "add", "number_guess", "read_docs_file"]
        assert "tavily_search" not in registry
        assert "rpg_issue_action" in registry

    def test_tavily_enabled_with_key(self):
        config = ToolsConfig(tavily=TavilyConfig(api_key="key"))

        registry = build_default_registry(config)

        assert "tavily_search" in registry

    def test_rpg_can_be_disabled(self):
        config = ToolsConfig(rpg=RpgConfig(enabled=False))

        registry = build_default_registry(config)

        assert not any(name.startswith("rpg_") for name in registry.names())

    def test_explicit_session_is_used(self):
        session = GameSession(Game(player_name="Shared"))

        registry = build_default_registry(ToolsConfig(), session=session)

        state = registry.get("rpg_get_state").execute({})
        assert state["player"]["name"] == "Shared"

    def test_uses_configured_constants(self):
        config = ToolsConfig(constants_x=1, constants_y=2)

        registry = build_default_registry(config)

        assert registry.get("get_constants").execute({}) == {"X": 1, "Y": 2}

    def test_issue_action_enum_matches_commands(self):
        """Every Command value is offered as an rpg action."""
        registry = build_default_registry(ToolsConfig())
        schema = registry.get("rpg_issue_action").parameters

        assert schema["properties"]["action"]["enum"] == [c.value for c in Command]
