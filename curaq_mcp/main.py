"""Minimal NDJSON stdio harness for trying the CuraQ tools by hand.

Protocol (development use only; MCP clients use `curaq_mcp.mcp_server`):
- Input: one JSON object per line.
  - {"action": "list_tools"}
  - {"action": "invoke", "tool": "list_articles", "params": {...}}
- Output: one JSON object per line.
  - {"ok": true, "result": ...}
  - {"ok": false, "error": "message"}

Listing tools works without a token; invoking needs CURAQ_MCP_TOKEN.
"""
from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, Optional

from .config import AppConfig, ConfigError, load_config
from .server import call_tool
from .tools import list_tools


def _print(obj: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(obj, ensure_ascii=False) + "\n")
    sys.stdout.flush()


def _describe_tools() -> Dict[str, Any]:
    return {
        "tools": [
            {
                "name": t.name,
                "description": t.description,
                "inputSchema": t.input_schema(),
            }
            for t in list_tools()
        ]
    }


def main() -> None:
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    cfg: Optional[AppConfig] = None

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        try:
            req = json.loads(line)
            action = req.get("action")
            if action == "list_tools":
                _print({"ok": True, "result": _describe_tools()})
                continue
            if action == "invoke":
                cfg = cfg or load_config()
                result = call_tool(req.get("tool"), req.get("params", {}), cfg)
                _print({"ok": True, "result": result.text})
                continue
            _print({"ok": False, "error": "unknown action"})
        except ConfigError as exc:
            _print({"ok": False, "error": str(exc)})
        except Exception as exc:  # pragma: no cover - keeps the loop alive
            _print({"ok": False, "error": str(exc)})


if __name__ == "__main__":
    main()
