#!/usr/bin/env python3
"""Configuration management for the Subscan event fetcher.

This module provides type-safe configuration dataclasses with validation.
Configuration is loaded once from environment variables at startup and
passed explicitly to the client and the fetcher.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import ClassVar
from urllib.parse import urlparse

# Get logger for this module
logger = logging.getLogger(__name__)

# Network value that switches the explorer off entirely
DISABLED_NETWORK = "NONE"


@dataclass(frozen=True, slots=True)
class SubscanConfig:
    """Configuration for the Subscan block explorer API.

    Attributes:
        network: Subscan network subdomain (e.g. 'spiritnet'), or 'NONE' to disable
        secret: API key sent in the X-API-Key header
    """

    network: str
    secret: str = ""

    EVENTS_LIST_PATH: ClassVar[str] = "/api/v2/scan/events"
    EVENTS_PARAMS_PATH: ClassVar[str] = "/api/scan/event/params"

    def __post_init__(self) -> None:
        """Validate Subscan configuration."""
        if not self.network:
            raise ValueError("Subscan network is required (SUBSCAN_NETWORK)")

        if self.enabled and not self.secret:
            raise ValueError(
                f"Subscan API secret is required for network {self.network} "
                "(SUBSCAN_SECRET)"
            )

    @property
    def enabled(self) -> bool:
        return self.network != DISABLED_NETWORK

    @property
    def api_url(self) -> str:
        return f"https://{self.network}.api.subscan.io"

    @property
    def events_list_url(self) -> str:
        return self.api_url + self.EVENTS_LIST_PATH

    @property
    def events_params_url(self) -> str:
        return self.api_url + self.EVENTS_PARAMS_PATH

    @property
    def headers(self) -> dict[str, str]:
        return {"X-API-Key": self.secret}


@dataclass(frozen=True, slots=True)
class NodeConfig:
    """Configuration for the node used to read the current chain height.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint of the node
        node_type: 'substrate' for Substrate JSON-RPC, 'evm' for Ethereum JSON-RPC
    """

    rpc_url: str
    node_type: str = "substrate"

    SUPPORTED_NODE_TYPES: ClassVar[set[str]] = {"substrate", "evm"}

    def __post_init__(self) -> None:
        """Validate node configuration."""
        if not self.rpc_url:
            raise ValueError("Node RPC URL is required (NODE_RPC_URL)")

        parsed = urlparse(self.rpc_url)
        if parsed.scheme not in ('http', 'https'):
            raise ValueError(
                f"Invalid RPC URL scheme: {parsed.scheme}. "
                "Expected http or https"
            )

        if self.node_type not in self.SUPPORTED_NODE_TYPES:
            raise ValueError(
                f"Unsupported node type: {self.node_type}. "
                f"Supported node types: {', '.join(sorted(self.SUPPORTED_NODE_TYPES))}"
            )


@dataclass(frozen=True, slots=True)
class FetchConfig:
    """Configuration for paging and rate limiting against Subscan."""
    query_interval: float = 1.0  # seconds between provider calls
    block_range_size: int = 100_000  # blocks per events list query
    max_rows: int = 100  # events per page, Subscan maximum
    request_timeout: int = 30  # HTTP request timeout in seconds

    MAX_ROWS_LIMIT: ClassVar[int] = 100

    def __post_init__(self) -> None:
        """Validate fetch configuration."""
        if self.query_interval < 0:
            raise ValueError(f"Query interval must be non-negative, got {self.query_interval}")
        if self.query_interval > 60:
            raise ValueError(f"Query interval too long (max 60s), got {self.query_interval}")

        if self.block_range_size <= 0:
            raise ValueError(f"Block range size must be positive, got {self.block_range_size}")

        if self.max_rows <= 0:
            raise ValueError(f"Max rows must be positive, got {self.max_rows}")
        if self.max_rows > self.MAX_ROWS_LIMIT:
            raise ValueError(
                f"Max rows too high (max {self.MAX_ROWS_LIMIT}), got {self.max_rows}"
            )

        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.request_timeout > 120:
            raise ValueError(f"Request timeout too long (max 120s), got {self.request_timeout}")


@dataclass(frozen=True, slots=True)
class SubscanEventsConfig:
    """Main configuration for the Subscan event fetcher.

    Attributes:
        subscan: Configuration for the Subscan API
        node: Configuration for the chain height node, None when Subscan is disabled
        fetch: Paging and rate limiting settings
    """

    subscan: SubscanConfig
    node: NodeConfig | None = None
    fetch: FetchConfig = field(default_factory=FetchConfig)

    def __post_init__(self) -> None:
        """Validate that an enabled explorer has a node to read heights from."""
        if self.subscan.enabled and self.node is None:
            raise ValueError(
                "Node configuration is required when Subscan is enabled (NODE_RPC_URL)"
            )

    @classmethod
    def from_env(cls) -> "SubscanEventsConfig":
        """Load configuration from environment variables.

        Returns:
            SubscanEventsConfig instance with loaded values

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        network = os.environ.get("SUBSCAN_NETWORK", "")
        if not network:
            raise ValueError(
                "SUBSCAN_NETWORK environment variable is required. "
                f"Example: spiritnet, or {DISABLED_NETWORK} to disable fetching"
            )

        subscan_config = SubscanConfig(
            network=network,
            secret=os.environ.get("SUBSCAN_SECRET", "")
        )

        node_config = None
        rpc_url = os.environ.get("NODE_RPC_URL", "")
        if subscan_config.enabled or rpc_url:
            node_config = NodeConfig(
                rpc_url=rpc_url,
                node_type=os.environ.get("NODE_TYPE", "substrate")
            )

        fetch_config = FetchConfig(
            query_interval=float(os.environ.get("QUERY_INTERVAL", "1.0")),
            block_range_size=int(os.environ.get("BLOCK_RANGE_SIZE", "100000")),
            max_rows=int(os.environ.get("MAX_ROWS", "100")),
            request_timeout=int(os.environ.get("REQUEST_TIMEOUT", "30"))
        )

        return cls(
            subscan=subscan_config,
            node=node_config,
            fetch=fetch_config
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Subscan Events Configuration")
        logger.info("=" * 60)

        logger.info("Subscan:")
        if self.subscan.enabled:
            logger.info(f"  Network: {self.subscan.network}")
            logger.info(f"  API URL: {self.subscan.api_url}")
            logger.info(f"  Secret: {'[SET]' if self.subscan.secret else '[NOT SET]'}")
        else:
            logger.info("  DISABLED")

        if self.node:
            logger.info("Node:")
            logger.info(f"  RPC URL: {self.node.rpc_url}")
            logger.info(f"  Type: {self.node.node_type}")

        logger.info("Fetch Settings:")
        logger.info(f"  Query Interval: {self.fetch.query_interval} seconds")
        logger.info(f"  Block Range Size: {self.fetch.block_range_size}")
        logger.info(f"  Max Rows: {self.fetch.max_rows}")
        logger.info(f"  Request Timeout: {self.fetch.request_timeout} seconds")

        logger.info("=" * 60)
