"""Core functionality for the Datadog MCP server."""

from .config import Config
from .logger import DatadogMcpLogger, setup_logger
from .registry import build_registry, dispatch

__all__ = ["Config", "DatadogMcpLogger", "setup_logger", "build_registry", "dispatch"]
