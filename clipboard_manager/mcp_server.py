#!/usr/bin/env python3
"""Clipboard Manager MCP Server."""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent
from mcp.server.models import InitializationOptions
from mcp.server.lowlevel import NotificationOptions

from clipboard_manager.core.clipboard import SystemClipboard
from clipboard_manager.core.config import RuntimeConfig, load_config
from clipboard_manager.core.manager import ClipboardManager
from clipboard_manager.core.storage import ClipStorage, VaultStorage
from clipboard_manager.models.schemas import ClipboardEntry

logger = logging.getLogger(__name__)

SERVER_NAME = "clipboard-manager"
SERVER_VERSION = "1.0.0"
MAX_LIMIT = 100


def clamp_limit(limit: Any) -> int:
    """Coerce a requested result count into 1..MAX_LIMIT."""
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        return 10
    return max(1, min(limit, MAX_LIMIT))


def entry_to_dict(entry: ClipboardEntry, full: bool = True) -> Dict[str, Any]:
    data = {"id": entry.id, "timestamp": entry.timestamp, "preview": entry.preview}
    if full:
        data["content"] = entry.content
    return data


class ClipboardManagerMCPServer:
    """MCP Server exposing clipboard history tools."""

    def __init__(
        self,
        manager: Optional[ClipboardManager] = None,
        config: Optional[RuntimeConfig] = None,
    ):
        if manager is None:
            config = config or load_config()
            manager = ClipboardManager(
                clipboard=SystemClipboard(),
                storage=ClipStorage(config.state_path),
                vault=VaultStorage(config.vault_path),
            )
        self.manager = manager

        # Bumped on every history change so clients can tell a listing is stale
        self.revision = 0
        self.manager.notifier.register(self._on_history_update)

        self.app = Server(SERVER_NAME)
        self._register_handlers()

    def _on_history_update(self):
        self.revision += 1

    def _register_handlers(self):
        """Register MCP protocol handlers."""

        @self.app.list_tools()
        async def list_tools() -> List[Tool]:
            return [
                Tool(
                    name="clip_list",
                    description="List recent clipboard entries, newest first",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "limit": {
                                "type": "integer",
                                "description": "Number of entries to return",
                                "default": 10,
                                "minimum": 1,
                                "maximum": 100,
                            },
                            "query": {
                                "type": "string",
                                "description": "Optional substring filter",
                                "default": "",
                            },
                        },
                    },
                ),
                Tool(
                    name="clip_search",
                    description="Case-insensitive substring search through clipboard history",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "query": {
                                "type": "string",
                                "description": "Text to look for",
                            },
                            "limit": {
                                "type": "integer",
                                "description": "Maximum results to return",
                                "default": 10,
                                "minimum": 1,
                                "maximum": 100,
                            },
                        },
                        "required": ["query"],
                    },
                ),
                Tool(
                    name="clip_get",
                    description="Get the full content of a clipboard entry",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "clip_id": {
                                "type": "string",
                                "description": "Entry identifier",
                            }
                        },
                        "required": ["clip_id"],
                    },
                ),
                Tool(
                    name="clip_copy",
                    description="Copy a clipboard history entry back onto the clipboard",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "clip_id": {
                                "type": "string",
                                "description": "Entry identifier",
                            }
                        },
                        "required": ["clip_id"],
                    },
                ),
                Tool(
                    name="clip_remove",
                    description="Remove clipboard entry by ID",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "clip_id": {
                                "type": "string",
                                "description": "Entry identifier",
                            }
                        },
                        "required": ["clip_id"],
                    },
                ),
                Tool(
                    name="clip_clear",
                    description="Delete the whole clipboard history",
                    inputSchema={"type": "object", "properties": {}},
                ),
                Tool(
                    name="clip_export",
                    description="Export clipboard entries to a markdown document",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "query": {
                                "type": "string",
                                "description": "Only export entries matching this text",
                                "default": "",
                            },
                            "folder": {
                                "type": "string",
                                "description": "Destination folder relative to the vault root",
                            },
                            "count": {
                                "type": "integer",
                                "description": "Maximum number of entries to export",
                                "minimum": 1,
                            },
                        },
                    },
                ),
                Tool(
                    name="clip_settings",
                    description="Show settings, optionally applying updates first",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "updates": {
                                "type": "object",
                                "description": (
                                    "Any of max_entries, poll_interval_ms, "
                                    "notify_on_capture, export_folder_path, "
                                    "export_default_count"
                                ),
                                "default": {},
                            }
                        },
                    },
                ),
            ]

        @self.app.call_tool()
        async def call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            """Handle MCP tool calls with structured output."""
            try:
                result = await self._dispatch_tool_call(name, arguments or {})
            except Exception as e:
                logger.exception(f"Tool {name} failed")
                result = {"error": str(e), "tool": name, "arguments": arguments}
            return [
                TextContent(
                    type="text",
                    text=json.dumps(result, indent=2, ensure_ascii=False),
                )
            ]

    async def _dispatch_tool_call(
        self, name: str, arguments: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Dispatch tool calls to appropriate handlers."""
        handlers = {
            "clip_list": self._handle_clip_list,
            "clip_search": self._handle_clip_search,
            "clip_get": self._handle_clip_get,
            "clip_copy": self._handle_clip_copy,
            "clip_remove": self._handle_clip_remove,
            "clip_clear": self._handle_clip_clear,
            "clip_export": self._handle_clip_export,
            "clip_settings": self._handle_clip_settings,
        }

        handler = handlers.get(name)
        if not handler:
            raise ValueError(f"Unknown tool: {name}")

        result = await handler(arguments)
        notices = self.manager.notices.drain()
        if notices:
            result["notices"] = notices
        return result

    async def _handle_clip_list(self, args: Dict[str, Any]) -> Dict[str, Any]:
        limit = clamp_limit(args.get("limit", 10))
        matches = self.manager.search(args.get("query", ""))
        clips = [entry_to_dict(entry, full=False) for entry in matches[:limit]]

        return {
            "clips": clips,
            "count": len(clips),
            "total": len(self.manager.history),
            "limit": limit,
            "revision": self.revision,
        }

    async def _handle_clip_search(self, args: Dict[str, Any]) -> Dict[str, Any]:
        query = args["query"]
        limit = clamp_limit(args.get("limit", 10))
        matches = self.manager.search(query)

        return {
            "query": query,
            "results": [entry_to_dict(entry) for entry in matches[:limit]],
            "count": min(len(matches), limit),
            "total_matches": len(matches),
        }

    async def _handle_clip_get(self, args: Dict[str, Any]) -> Dict[str, Any]:
        clip_id = args["clip_id"]
        entry = self.manager.history.get(clip_id)
        if entry is None:
            return {"id": clip_id, "status": "not_found"}
        return entry_to_dict(entry)

    async def _handle_clip_copy(self, args: Dict[str, Any]) -> Dict[str, Any]:
        clip_id = args["clip_id"]
        entry = self.manager.history.get(clip_id)
        if entry is None:
            return {"id": clip_id, "status": "not_found"}

        if self.manager.copy_to_clipboard(entry.content):
            return {"id": clip_id, "status": "copied"}
        return {"id": clip_id, "status": "failed"}

    async def _handle_clip_remove(self, args: Dict[str, Any]) -> Dict[str, Any]:
        clip_id = args["clip_id"]

        removed = self.manager.delete_entry(clip_id)
        if removed:
            return {"id": clip_id, "status": "removed", "removed": removed}
        else:
            return {"id": clip_id, "status": "not_found"}

    async def _handle_clip_clear(self, args: Dict[str, Any]) -> Dict[str, Any]:
        self.manager.clear_history()
        return {"status": "cleared"}

    async def _handle_clip_export(self, args: Dict[str, Any]) -> Dict[str, Any]:
        path = self.manager.export(
            query=args.get("query", ""),
            folder=args.get("folder"),
            max_count=args.get("count"),
        )
        if path is None:
            return {"status": "not_exported"}
        return {"status": "exported", "path": path}

    async def _handle_clip_settings(self, args: Dict[str, Any]) -> Dict[str, Any]:
        updates = args.get("updates") or {}
        settings = self.manager.update_settings(**updates)
        return settings.model_dump()

    async def run(self):
        """Run the MCP server with clipboard monitoring on the same loop."""
        self.manager.load()
        self.manager.start()
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.app.run(
                    read_stream,
                    write_stream,
                    InitializationOptions(
                        server_name=SERVER_NAME,
                        server_version=SERVER_VERSION,
                        capabilities=self.app.get_capabilities(
                            notification_options=NotificationOptions(),
                            experimental_capabilities={},
                        ),
                    ),
                )
        finally:
            self.manager.shutdown()


async def async_main():
    """Main async entry point."""
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server = ClipboardManagerMCPServer(config=config)
    await server.run()


def main():
    """Synchronous entry point for console script."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Clipboard Manager MCP Server stopped")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise


if __name__ == "__main__":
    main()
