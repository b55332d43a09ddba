"""
Chain utility for reading the current block height from a node.

Supports Substrate nodes through the `chain_getHeader` JSON-RPC method and
EVM nodes through web3.
"""

import logging
from typing import Any

import httpx
from web3 import AsyncHTTPProvider, AsyncWeb3

from ..config import NodeConfig

logger = logging.getLogger(__name__)


class ChainUtility:
    """
    Utility for querying the head of the chain.

    Can be used with two kinds of node:
    1. substrate: JSON-RPC `chain_getHeader` over HTTP
    2. evm: `eth_blockNumber` through AsyncWeb3
    """

    def __init__(
        self,
        node: NodeConfig,
        request_timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        """
        Initialize the ChainUtility.

        Args:
            node: Node RPC URL and type
            request_timeout: HTTP request timeout in seconds
            transport: Optional httpx transport for Substrate requests
        """
        self.node = node
        self.request_timeout = request_timeout
        self.transport = transport
        self.async_w3: AsyncWeb3 | None = None

        if node.node_type == "evm":
            self.async_w3 = AsyncWeb3(AsyncHTTPProvider(node.rpc_url))

    async def _rpc_call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        async with httpx.AsyncClient(transport=self.transport) as client:
            logger.debug(f"Posting {method} to {self.node.rpc_url}")
            response = await client.post(
                self.node.rpc_url, json=payload, timeout=self.request_timeout
            )
            response.raise_for_status()
            body = response.json()

        if "error" in body:
            raise RuntimeError(f"RPC call {method} failed: {body['error']}")
        return body["result"]

    async def get_block_number(self) -> int:
        """
        Get the current block height of the node.

        Returns:
            Number of the latest block
        """
        if self.async_w3 is not None:
            block_number = await self.async_w3.eth.block_number
        else:
            header = await self._rpc_call("chain_getHeader", [])
            block_number = int(header["number"], 16)

        logger.debug(f"Current block on {self.node.rpc_url}: {block_number}")
        return block_number
