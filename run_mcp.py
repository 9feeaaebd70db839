#!/usr/bin/env python3
"""Run the ComfyUI MCP server."""

import os

os.environ.setdefault("COMFYMCP_LOG_PREFIX", "mcp")

from comfymcp.mcp.server import main

if __name__ == "__main__":
    main()
