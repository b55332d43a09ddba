#!/usr/bin/env python3
"""Tests for ChainUtility.

This module tests reading the current block height from Substrate nodes
over JSON-RPC and from EVM nodes through web3.
"""

import json
from unittest.mock import MagicMock

import httpx
import pytest
from web3 import AsyncWeb3

from subscan_events.config import NodeConfig
from subscan_events.utils.chain_utility import ChainUtility


class TestSubstrateNode:
    """Test cases for Substrate nodes."""

    @pytest.mark.asyncio
    async def test_block_number_from_header(self):
        """Test that the hex header number is decoded."""
        requests = []

        def handler(request):
            requests.append(json.loads(request.content))
            return httpx.Response(200, json={
                "jsonrpc": "2.0",
                "id": 1,
                "result": {"number": "0x4e5a2f", "parentHash": "0x00"},
            })

        utility = ChainUtility(
            NodeConfig(rpc_url="https://kilt-rpc.dwellir.com"),
            transport=httpx.MockTransport(handler)
        )

        assert await utility.get_block_number() == 0x4e5a2f
        assert requests == [{"jsonrpc": "2.0", "id": 1, "method": "chain_getHeader", "params": []}]
        assert utility.async_w3 is None

    @pytest.mark.asyncio
    async def test_rpc_error_raises(self):
        """Test that a JSON-RPC error response is raised."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32601, "message": "Method not found"},
        }))
        utility = ChainUtility(NodeConfig(rpc_url="http://localhost:9933"), transport=transport)

        with pytest.raises(RuntimeError, match="chain_getHeader"):
            await utility.get_block_number()

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        """Test that HTTP errors from the node are not swallowed."""
        transport = httpx.MockTransport(lambda request: httpx.Response(502))
        utility = ChainUtility(NodeConfig(rpc_url="http://localhost:9933"), transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await utility.get_block_number()


class TestEvmNode:
    """Test cases for EVM nodes."""

    def test_creates_async_web3(self):
        """Test that EVM nodes are read through AsyncWeb3."""
        utility = ChainUtility(NodeConfig(rpc_url="https://rpc.api.moonbeam.network", node_type="evm"))

        assert isinstance(utility.async_w3, AsyncWeb3)

    @pytest.mark.asyncio
    async def test_block_number_from_web3(self):
        """Test that the block number comes from eth.block_number."""
        utility = ChainUtility(NodeConfig(rpc_url="https://rpc.api.moonbeam.network", node_type="evm"))

        async def head():
            return 9_123_456

        utility.async_w3 = MagicMock()
        utility.async_w3.eth.block_number = head()

        assert await utility.get_block_number() == 9_123_456
