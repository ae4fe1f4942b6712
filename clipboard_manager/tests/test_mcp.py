"""Tests for MCP server functionality."""

import os

import pytest

from clipboard_manager.mcp_server import ClipboardManagerMCPServer, clamp_limit
from clipboard_manager.models.schemas import ClipboardEntry


class TestClipboardManagerMCPServer:
    """Tool handlers against a manager on temporary storage."""

    @pytest.fixture
    def server(self, manager):
        return ClipboardManagerMCPServer(manager=manager)

    @pytest.fixture
    def seeded(self, server):
        entries = [
            ClipboardEntry.create("Alpha note", timestamp=1_700_000_000_001),
            ClipboardEntry.create("# Beta heading", timestamp=1_700_000_000_002),
            ClipboardEntry.create("gamma ALPHA", timestamp=1_700_000_000_003),
        ]
        server.manager.state.history = list(reversed(entries))
        return entries

    @pytest.mark.asyncio
    async def test_list_clips(self, server, seeded):
        result = await server._dispatch_tool_call("clip_list", {"limit": 2})

        assert result["count"] == 2
        assert result["total"] == 3
        assert result["limit"] == 2
        assert [c["id"] for c in result["clips"]] == [seeded[2].id, seeded[1].id]
        assert "content" not in result["clips"][0]

    @pytest.mark.asyncio
    async def test_search_clips(self, server, seeded):
        result = await server._dispatch_tool_call("clip_search", {"query": "alpha"})

        assert result["count"] == 2
        assert [r["content"] for r in result["results"]] == [
            "gamma ALPHA",
            "Alpha note",
        ]

    @pytest.mark.asyncio
    async def test_get_clip(self, server, seeded):
        result = await server._dispatch_tool_call("clip_get", {"clip_id": seeded[0].id})
        assert result["content"] == "Alpha note"

        result = await server._dispatch_tool_call("clip_get", {"clip_id": "nope"})
        assert result["status"] == "not_found"

    @pytest.mark.asyncio
    async def test_copy_clip(self, server, seeded, clipboard):
        result = await server._dispatch_tool_call("clip_copy", {"clip_id": seeded[1].id})

        assert result["status"] == "copied"
        assert result["notices"] == ["Copied to clipboard!"]
        assert clipboard.content == "# Beta heading"

    @pytest.mark.asyncio
    async def test_copy_failure(self, server, seeded, clipboard):
        clipboard.error = RuntimeError("denied")

        result = await server._dispatch_tool_call("clip_copy", {"clip_id": seeded[1].id})

        assert result["status"] == "failed"
        assert result["notices"] == ["Failed to copy to clipboard"]

    @pytest.mark.asyncio
    async def test_remove_clip(self, server, seeded):
        clip_id = seeded[0].id

        result = await server._dispatch_tool_call("clip_remove", {"clip_id": clip_id})
        assert result["status"] == "removed"
        assert result["id"] == clip_id

        result = await server._dispatch_tool_call("clip_remove", {"clip_id": clip_id})
        assert result["status"] == "not_found"

    @pytest.mark.asyncio
    async def test_clear(self, server, seeded):
        result = await server._dispatch_tool_call("clip_clear", {})

        assert result["status"] == "cleared"
        assert result["notices"] == ["Clipboard history cleared!"]
        assert len(server.manager.history) == 0

    @pytest.mark.asyncio
    async def test_export(self, server, seeded):
        result = await server._dispatch_tool_call(
            "clip_export", {"query": "alpha", "folder": "mcp", "count": 5}
        )

        assert result["status"] == "exported"
        path = os.path.join(server.manager.exporter.storage.root, result["path"])
        with open(path, encoding="utf-8") as f:
            assert f.read().count("## Entry ") == 2

    @pytest.mark.asyncio
    async def test_export_empty(self, server):
        result = await server._dispatch_tool_call("clip_export", {})

        assert result["status"] == "not_exported"
        assert result["notices"] == ["No entries to export"]

    @pytest.mark.asyncio
    async def test_settings(self, server):
        result = await server._dispatch_tool_call(
            "clip_settings", {"updates": {"max_entries": 3, "poll_interval_ms": 1}}
        )

        assert result["max_entries"] == 3
        assert result["poll_interval_ms"] == 1000

        result = await server._dispatch_tool_call("clip_settings", {})
        assert result["max_entries"] == 3

    @pytest.mark.asyncio
    async def test_revision_tracks_history_updates(self, server):
        before = (await server._dispatch_tool_call("clip_list", {}))["revision"]

        server.manager.history.add("one")
        server.manager.history.add("two")

        after = (await server._dispatch_tool_call("clip_list", {}))["revision"]
        assert after == before + 2

    @pytest.mark.asyncio
    async def test_unknown_tool(self, server):
        with pytest.raises(ValueError):
            await server._dispatch_tool_call("clip_explode", {})

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, server, seeded):
        result = await server._dispatch_tool_call("clip_list", {"limit": 0})
        assert result["count"] == 1
        assert result["limit"] == 1

        result = await server._dispatch_tool_call(
            "clip_search", {"query": "alpha", "limit": -1}
        )
        assert [r["content"] for r in result["results"]] == ["gamma ALPHA"]

        result = await server._dispatch_tool_call("clip_list", {"limit": 5000})
        assert result["limit"] == 100
        assert result["count"] == 3


@pytest.mark.parametrize(
    "requested,expected", [(0, 1), (-5, 1), (7, 7), (250, 100), ("3", 3), (None, 10)]
)
def test_clamp_limit(requested, expected):
    assert clamp_limit(requested) == expected
