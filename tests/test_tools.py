from __future__ import annotations

import pytest

from curaq_mcp.tools import ParamSpec, get_tool, list_tools, to_mcp_tool


def test_five_tools_in_stable_order() -> None:
    names = [t.name for t in list_tools()]
    assert names == [
        "list_articles",
        "search_articles",
        "get_article",
        "update_article_status",
        "save_article",
    ]
    assert [t.name for t in list_tools()] == names


def test_search_schema_has_enum_default_and_required() -> None:
    schema = get_tool("search_articles").input_schema()

    assert schema["type"] == "object"
    assert schema["required"] == ["query"]
    assert schema["properties"]["mode"]["enum"] == ["keyword", "semantic"]
    assert schema["properties"]["mode"]["default"] == "semantic"
    assert schema["properties"]["limit"]["type"] == "number"
    assert schema["properties"]["limit"]["default"] == 10


def test_optional_only_tool_has_no_required_key() -> None:
    schema = get_tool("list_articles").input_schema()
    assert "required" not in schema
    assert schema["properties"]["limit"]["default"] == 20


def test_update_status_requires_id_and_action() -> None:
    schema = get_tool("update_article_status").input_schema()
    assert schema["required"] == ["article_id", "action"]
    assert schema["properties"]["action"]["enum"] == ["read", "delete"]


def test_save_article_optional_fields() -> None:
    schema = get_tool("save_article").input_schema()
    assert schema["required"] == ["url"]
    assert set(schema["properties"]) == {"url", "title", "markdown"}


def test_unknown_tool_lookup() -> None:
    assert get_tool("nope") is None


def test_param_spec_invariants() -> None:
    with pytest.raises(ValueError):
        ParamSpec("id", "string", "id", required=True, default="x")
    with pytest.raises(ValueError):
        ParamSpec("mode", "enum", "mode")


def test_to_mcp_tool() -> None:
    tool = to_mcp_tool(get_tool("get_article"))
    assert tool.name == "get_article"
    assert tool.inputSchema["required"] == ["article_id"]
    assert tool.description
