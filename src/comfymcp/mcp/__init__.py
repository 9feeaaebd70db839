"""MCP transport wiring."""
