"""Configuration management for the Datadog MCP server."""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv

from .errors import MissingEnvironmentVariable
from .models import ALL_DOMAINS


class Config:
    """Configuration settings, read once from the environment."""

    def __init__(self, env_file: Optional[str] = ".env") -> None:
        # Load environment variables from .env file if it exists
        if env_file and Path(env_file).exists():
            load_dotenv(env_file)

        # Core MCP settings
        self.server_name = os.environ.get('MCP_SERVER_NAME', 'datadog')
        self.server_version = os.environ.get('MCP_SERVER_VERSION', '1.0.0')
        self.mcp_transport = os.environ.get('MCP_TRANSPORT', 'stdio')
        self.log_level = os.environ.get('LOG_LEVEL', 'INFO')
        self.slow_tool_threshold_ms = int(os.environ.get('SLOW_TOOL_THRESHOLD_MS', '5000'))

        # Domain enablement
        self.enabled_domains = self._parse_enabled_domains()

        # Datadog configuration
        self.datadog_api_key = os.environ.get('DATADOG_API_KEY')
        self.datadog_app_key = os.environ.get('DATADOG_APP_KEY')
        self.datadog_site = os.environ.get('DATADOG_SITE') or 'datadoghq.com'
        self.datadog_region = os.environ.get('DATADOG_REGION') or 'us1'

    def _parse_enabled_domains(self) -> Tuple[str, ...]:
        """Parse enabled domains from environment variable, keeping catalogue order."""
        domains_str = os.environ.get('DATADOG_ENABLED_DOMAINS', '')
        requested = {domain.strip().lower() for domain in domains_str.split(',') if domain.strip()}
        if not requested:
            return ALL_DOMAINS
        return tuple(domain for domain in ALL_DOMAINS if domain in requested)

    @property
    def is_stdio_transport(self) -> bool:
        """Check if using stdio transport."""
        return self.mcp_transport.lower() == 'stdio'

    def get_missing_config(self) -> List[str]:
        """Names of required variables that are not set."""
        missing = []
        if not self.datadog_api_key:
            missing.append('DATADOG_API_KEY')
        if not self.datadog_app_key:
            missing.append('DATADOG_APP_KEY')
        return missing

    def require_credentials(self) -> None:
        """Raise ``MissingEnvironmentVariable`` when a required value is absent."""
        missing = self.get_missing_config()
        if missing:
            raise MissingEnvironmentVariable(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

    def to_dict(self) -> Dict:
        """Convert config to dictionary for logging. Secrets are never included."""
        return {
            'server_name': self.server_name,
            'server_version': self.server_version,
            'mcp_transport': self.mcp_transport,
            'log_level': self.log_level,
            'enabled_domains': list(self.enabled_domains),
            'datadog': {
                'site': self.datadog_site,
                'region': self.datadog_region,
                'api_key_set': bool(self.datadog_api_key),
                'app_key_set': bool(self.datadog_app_key),
            },
            'slow_tool_threshold_ms': self.slow_tool_threshold_ms,
        }
