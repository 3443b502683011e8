"""
Datadog MCP Server

A Model Context Protocol (MCP) server exposing Datadog metrics, logs, events,
monitors and APM traces as tools.
"""

__version__ = "1.0.0"

from .server import DatadogMcpServer

__all__ = ["DatadogMcpServer"]
