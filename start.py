#!/usr/bin/env python3
"""
Datadog MCP Server - start script.

Usage:
  python start.py --server     # Start the MCP server on stdio
  python start.py --tools      # List the registered tools
  python start.py --check      # Check the configuration
"""

from datadog_mcp.cli import main

if __name__ == "__main__":
    main()
