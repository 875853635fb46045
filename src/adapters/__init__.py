"""Infrastructure adapters: processes, files, templates, MCP transport."""
