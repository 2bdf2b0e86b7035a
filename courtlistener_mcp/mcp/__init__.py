"""MCP server package for courtlistener-mcp.

The MCP server is meant for LLM agents to call CourtListener tools like:
- search-dockets / get-docket
- search-opinions / get-opinion
- recap-query

Transport:
- stdio (implemented)
- HTTP: see ``courtlistener_mcp.main`` for the REST surface over the same tools
"""
