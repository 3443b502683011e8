"""Command line entry point for the Datadog MCP server."""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.config import Config
from .core.errors import MissingEnvironmentVariable
from .server import DatadogMcpServer

console = Console()


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Datadog MCP Server - Datadog monitoring APIs as MCP tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  datadog-mcp --server        # Start the MCP server on stdio
  datadog-mcp --tools         # List the tools that would be served
  datadog-mcp --check         # Check the configuration
        """
    )

    parser.add_argument(
        '--server', '-s',
        action='store_true',
        help='Start the MCP server'
    )

    parser.add_argument(
        '--tools', '-t',
        action='store_true',
        help='List the registered tools'
    )

    parser.add_argument(
        '--check', '-c',
        action='store_true',
        help='Check the configuration without starting the server'
    )

    return parser.parse_args(argv)


def check_config(config: Config) -> bool:
    """Print the configuration and report missing required values."""
    console.print(Panel.fit(
        "[bold magenta]🐶 Datadog MCP Server[/bold magenta]\n[dim]Configuration check[/dim]",
        border_style="magenta"
    ))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in config.to_dict().items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                table.add_row(f"{key}.{sub_key}", str(sub_value))
        else:
            table.add_row(key, str(value))
    console.print(table)

    missing = config.get_missing_config()
    if missing:
        console.print(f"\n❌ Missing required settings: {', '.join(missing)}", style="red")
        return False
    console.print("\n✅ Configuration looks complete", style="bold green")
    return True


def show_tools(server: DatadogMcpServer) -> None:
    table = Table(title="🔧 Registered tools", show_header=True, header_style="bold magenta")
    table.add_column("Domain", style="yellow")
    table.add_column("Tool", style="cyan")
    table.add_column("Description")
    for tool in server.registry.values():
        table.add_row(tool.domain, tool.name, tool.description)
    console.print(table)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        config = Config()

        if args.server:
            # No console output here: stdout carries JSON-RPC
            asyncio.run(DatadogMcpServer(config).run())

        elif args.tools:
            show_tools(DatadogMcpServer(config))

        else:
            success = check_config(config)
            if not args.check:
                console.print("\n🎯 Quick Actions:", style="bold blue")
                console.print("   datadog-mcp --server   # Start the MCP server", style="green")
                console.print("   datadog-mcp --tools    # List tools", style="cyan")
            sys.exit(0 if success else 1)

    except MissingEnvironmentVariable as e:
        Console(stderr=True).print(f"❌ {e}", style="red")
        sys.exit(1)
    except KeyboardInterrupt:
        Console(stderr=True).print("\n👋 Cancelled by user", style="yellow")
        sys.exit(1)


if __name__ == "__main__":
    main()
