"""HTTP client for the Shopify Admin API (GraphQL plus one REST listing)."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from stocksync.adapters.http_resilience import ResilientClient, log_call_limit
from stocksync.domain.errors import ProtocolError, TransportError

from .schema import GraphQLResponse, LocationsResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from stocksync.config.http_resilience import ResilienceConfig
    from stocksync.config.shopify import ShopifyConfig

log = getLogger(__name__)

_BODY_SNIPPET_LENGTH = 300


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    hooks = (*config.response_hooks, log_call_limit)
    return ResilientClient(replace(config, response_hooks=hooks))


class ShopifyClient:
    """Low-level client; one short-lived ``ResilientClient`` per call.

    Failures reaching Shopify, non-2xx responses and GraphQL top-level
    ``errors`` raise ``TransportError``. Payloads that do not match the
    expected schema raise ``ProtocolError``.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client_factory

    def execute[TModel: BaseModel](
        self,
        query: str,
        variables: Mapping[str, object] | None = None,
        *,
        model: type[TModel],
    ) -> TModel:
        return asyncio.run(self._execute_async(query, dict(variables or {}), model))

    def list_locations(self) -> LocationsResponse:
        return asyncio.run(self._list_locations_async())

    async def _execute_async[TModel: BaseModel](
        self,
        query: str,
        variables: dict[str, object],
        model: type[TModel],
    ) -> TModel:
        async with self._client_factory(self._config.resilience) as client:
            payload = await self._perform_request(
                client,
                "POST",
                self._config.graphql_url,
                json={"query": query, "variables": variables},
            )

        envelope = _validate(GraphQLResponse, payload)
        if envelope.errors:
            messages = "; ".join(error.message for error in envelope.errors)
            codes = {error.code for error in envelope.errors if error.code}
            log.error("Shopify GraphQL error (codes=%s): %s", sorted(codes), messages)
            raise TransportError(f"Shopify GraphQL error: {messages}")
        if envelope.data is None:
            raise ProtocolError("Shopify GraphQL response has no data")
        return _validate(model, envelope.data)

    async def _list_locations_async(self) -> LocationsResponse:
        async with self._client_factory(self._config.lookup_resilience()) as client:
            payload = await self._perform_request(client, "GET", self._config.locations_url)
        return _validate(LocationsResponse, payload)

    async def _perform_request(
        self,
        client: ResilientClient,
        method: str,
        url: str,
        *,
        json: object | None = None,
    ) -> object:
        try:
            response = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            raise TransportError(f"Shopify request failed: {exc}") from exc

        if response.is_error:
            snippet = response.text[:_BODY_SNIPPET_LENGTH]
            raise TransportError(
                f"Shopify returned HTTP {response.status_code}: {snippet}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ProtocolError("Shopify response is not valid JSON") from exc


def _validate[TModel: BaseModel](model: type[TModel], payload: object) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Unexpected Shopify {model.__name__} payload: {exc}") from exc
