"""Logging for the Datadog MCP server."""

import logging
import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

SENSITIVE_KEYS = frozenset({
    'api_key', 'app_key', 'apikey', 'appkey', 'password', 'secret', 'token',
})
REDACTED = '[REDACTED]'


def is_mcp_mode() -> bool:
    """Detect if we're running in MCP mode where stdout is used for JSON communication."""
    if os.environ.get("DATADOG_MCP_MODE") == "true":
        return True

    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    return transport == "stdio" and not sys.stdout.isatty()


def redact_secrets(value: Any) -> Any:
    """Copy of ``value`` with sensitive keys masked, at any depth."""
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else redact_secrets(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_secrets(item) for item in value]
    return value


class DatadogMcpLogger:
    """Logger with emojis and rich formatting.

    All output goes to stderr: stdout carries the MCP JSON-RPC stream.
    """

    def __init__(self, name: str, level: str = "INFO"):
        self.console = Console(file=sys.stderr)
        self.is_mcp_mode = is_mcp_mode()

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        # Clear existing handlers
        self.logger.handlers.clear()
        self.logger.propagate = False

        rich_handler = RichHandler(
            console=self.console,
            show_time=True,
            show_path=False,
            markup=True,
            rich_tracebacks=True
        )
        rich_handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.addHandler(rich_handler)

    def startup_banner(self, config_dict: dict):
        """Display startup banner with configuration."""
        config_dict = redact_secrets(config_dict)
        if self.is_mcp_mode:
            self.logger.info(f"Datadog MCP server starting with {config_dict}")
            return

        banner = Panel.fit(
            "[bold magenta]🐶 Datadog MCP Server[/bold magenta]\n"
            "[dim]Metrics, logs, events, monitors and APM as MCP tools[/dim]",
            border_style="magenta"
        )
        self.console.print(banner)

        table = Table(title="🔧 Configuration", show_header=True, header_style="bold magenta")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        for key, value in config_dict.items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    table.add_row(f"{key}.{sub_key}", str(sub_value))
            else:
                table.add_row(key, str(value))

        self.console.print(table)

    def domain_status(self, domain: str, status: str, details: Optional[str] = None):
        """Log domain status with appropriate emoji."""
        emoji_map = {
            'ready': '✅',
            'error': '❌',
            'warning': '⚠️',
            'disabled': '⏸️'
        }

        emoji = emoji_map.get(status, '📋')
        message = f"{emoji} {domain.upper()}: {status}"
        if details:
            message += f" - {details}"

        if status == 'error':
            self.logger.error(message)
        elif status == 'warning':
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def tool_completed(self, tool_name: str, duration_ms: float, success: bool = True, slow: bool = False):
        """Log one line per tool call: name, duration and the slow flag."""
        emoji = "✅" if success else "❌"
        status = "completed" if success else "failed"
        message = (
            f"{emoji} [bold cyan]{tool_name}[/bold cyan] {status} "
            f"in {duration_ms:.0f}ms slow={str(slow).lower()}"
        )
        if slow:
            self.logger.warning(f"🐢 {message}")
        else:
            self.logger.info(message)

    def error(self, message: str, domain: Optional[str] = None, context: Optional[dict] = None):
        """Log errors with context."""
        self.logger.error(f"❌ {self._format(message, domain, 'red', context)}")

    def warning(self, message: str, domain: Optional[str] = None, context: Optional[dict] = None):
        """Log warnings with context."""
        self.logger.warning(f"⚠️ {self._format(message, domain, 'yellow', context)}")

    def info(self, message: str, domain: Optional[str] = None, context: Optional[dict] = None):
        self.logger.info(f"ℹ️ {self._format(message, domain, 'blue', context)}")

    def debug(self, message: str, domain: Optional[str] = None, context: Optional[dict] = None):
        self.logger.debug(f"🔍 {self._format(message, domain, 'dim', context)}")

    @staticmethod
    def _format(message: str, domain: Optional[str], style: str, context: Optional[dict]) -> str:
        prefix = f"[{style}]{domain.upper()}[/{style}] " if domain else ""
        suffix = f" {escape(str(redact_secrets(context)))}" if context else ""
        return f"{prefix}{escape(str(message))}{suffix}"


def setup_logger(name: str = "datadog_mcp", level: str = "INFO") -> DatadogMcpLogger:
    """Setup and return the logger."""
    return DatadogMcpLogger(name, level)
