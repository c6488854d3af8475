"""
GKE MCP Gateway.

Service-account-authenticated access to GKE and Cloud Logging, exposed to
AI agents as MCP tools.

Example:
    To run the MCP server standalone:
    >>> from gke_mcp.server import mcp
    >>> mcp.run(transport="streamable-http", host="0.0.0.0", port=8080)

    To mount in FastAPI:
    >>> from fastapi import FastAPI
    >>> from gke_mcp.server import create_mcp_app
    >>> app = FastAPI()
    >>> app.mount("/gke", create_mcp_app())
"""

__version__ = "0.1.0"
