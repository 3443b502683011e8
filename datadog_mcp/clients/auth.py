"""Datadog authentication handler."""

from typing import Dict, Optional

from datadog_api_client import AsyncApiClient, Configuration

from ..core.config import Config
from ..core.logger import DatadogMcpLogger


class DatadogAuth:
    """Hold Datadog credentials and the shared async API client."""

    def __init__(self, config: Config, logger: DatadogMcpLogger):
        self.config = config
        self.logger = logger
        self.configuration: Optional[Configuration] = None
        self.api_client: Optional[AsyncApiClient] = None
        self._initialize()

    def _initialize(self):
        """Initialize Datadog configuration."""
        if not self.validate_credentials():
            self.logger.warning("Datadog credentials not properly configured", "datadog")
            return

        self.configuration = Configuration()
        self.configuration.api_key["apiKeyAuth"] = self.config.datadog_api_key
        self.configuration.api_key["appKeyAuth"] = self.config.datadog_app_key
        self.configuration.server_variables["site"] = self.config.datadog_site

        self.api_client = AsyncApiClient(self.configuration)
        self.logger.info(f"Datadog auth initialized for site: {self.config.datadog_site}", "datadog")

    def validate_credentials(self) -> bool:
        """Validate Datadog credentials are available."""
        if not self.config.datadog_api_key:
            self.logger.error("DATADOG_API_KEY environment variable is required", "datadog")
            return False

        if not self.config.datadog_app_key:
            self.logger.error("DATADOG_APP_KEY environment variable is required", "datadog")
            return False

        self.logger.debug("Datadog credentials found", "datadog")
        return True

    def get_api_client(self) -> AsyncApiClient:
        """Get the configured API client."""
        if not self.api_client:
            raise RuntimeError("Datadog API client not initialized")
        return self.api_client

    @property
    def api_base_url(self) -> str:
        return f"https://api.{self.config.datadog_site}"

    def get_auth_headers(self) -> Dict[str, str]:
        """Get authentication headers for raw HTTP calls."""
        return {
            "DD-API-KEY": self.config.datadog_api_key or "",
            "DD-APPLICATION-KEY": self.config.datadog_app_key or "",
            "Content-Type": "application/json",
        }
