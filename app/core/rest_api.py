"""
Process-wide httpx client for object storage calls.

The client is built lazily on first use, from ``ObjectStorageConfig`` set in
the lifespan, and closed at shutdown. Image uploads share its connections.

Usage:
    StorageClientPool.configure(ClientConfig.from_storage(storage_config))
    client = await StorageClientPool.get_client()
    await client.put(url, content=payload)

    await StorageClientPool.dispose()
"""

import asyncio

import httpx
from pydantic import BaseModel, Field

from app.main_config import ObjectStorageConfig

__all__ = ["ClientConfig", "StorageClientPool"]


class ClientConfig(BaseModel):
    """Transport settings of the storage client."""

    connect_timeout: float = Field(default=5.0, gt=0)
    transfer_timeout: float = Field(default=30.0, gt=0, description="Read, write and pool wait")
    max_connections: int = 20
    max_keepalive: int = 10
    keepalive_expiry: float = 30.0
    max_retries: int = Field(default=3, ge=0, description="Connect retries, never replays a request")
    http2: bool = False
    verify_ssl: bool = True

    @classmethod
    def from_storage(cls, config: ObjectStorageConfig) -> "ClientConfig":
        """Transfers are allowed as long as the catalog's upload bound."""
        return cls(
            connect_timeout=config.connect_timeout,
            transfer_timeout=config.upload_timeout,
            max_retries=config.max_retries,
            http2=config.http2,
        )

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.transfer_timeout, connect=self.connect_timeout)

    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive,
            keepalive_expiry=self.keepalive_expiry,
        )


class StorageClientPool:
    """Lazily created, shared ``httpx.AsyncClient``."""

    _client: httpx.AsyncClient | None = None
    _config: ClientConfig = ClientConfig()
    _lock: asyncio.Lock | None = None

    @classmethod
    def configure(cls, config: ClientConfig) -> None:
        """Replace the settings. Takes effect for the next client built."""
        cls._config = config

    @classmethod
    def config(cls) -> ClientConfig:
        return cls._config

    @classmethod
    async def get_client(cls) -> httpx.AsyncClient:
        if cls._client is not None:
            return cls._client

        if cls._lock is None:
            cls._lock = asyncio.Lock()
        async with cls._lock:
            if cls._client is None:
                config = cls._config
                cls._client = httpx.AsyncClient(
                    transport=httpx.AsyncHTTPTransport(
                        retries=config.max_retries,
                        http2=config.http2,
                        verify=config.verify_ssl,
                        limits=config.limits(),
                    ),
                    timeout=config.timeout(),
                )
        return cls._client

    @classmethod
    async def dispose(cls) -> None:
        """Close the client; the next get_client builds a new one."""
        client, cls._client, cls._lock = cls._client, None, None
        if client is not None:
            await client.aclose()
