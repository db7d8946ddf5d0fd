"""Outbound invocation node — calls an HTTP service and adopts its response.

One request per message.  For write-style methods (POST, PUT, PATCH) the
current payload is sent as the JSON body.  Any HTTP response, whatever its
status, replaces the payload with the decoded body and the message moves
on.  Transport-level errors (connection failures, timeouts) are reported
through the node's failure capability and the message goes no further.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from switchyard.core.node import Node
from switchyard.models.message import Message
from switchyard.nodes.options import CallOptions

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., httpx.Client]

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def decode_body(response: httpx.Response) -> Any:
    """Return the JSON body of *response*, its text, or ``None`` when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class CallWork:
    """Issues one HTTP request per message.

    Parameters
    ----------
    options:
        Validated target, method, path arguments and timeouts.
    client_factory:
        Builds the ``httpx.Client`` for each request; receives ``timeout``.
    """

    kind = "call"

    def __init__(
        self,
        options: CallOptions,
        client_factory: ClientFactory = httpx.Client,
    ) -> None:
        self.options = options
        self._client_factory = client_factory
        self._timeout = httpx.Timeout(
            options.response_timeout, connect=options.request_timeout
        )

    @property
    def url(self) -> str:
        """Target URL with path arguments substituted."""
        if not self.options.path_arguments:
            return self.options.url
        return self.options.url.format(
            **{
                name: quote(str(value), safe="")
                for name, value in self.options.path_arguments.items()
            }
        )

    def __call__(self, node: Node, message: Message) -> None:
        method = self.options.method
        url = self.url
        request: dict[str, Any] = {"headers": JSON_HEADERS}
        if self.options.sends_body:
            request["json"] = message.payload

        logger.debug(
            "Node %s invoking %s %s for message %s",
            node.id,
            method,
            url,
            message.correlation_id,
        )
        try:
            with self._client_factory(timeout=self._timeout) as client:
                response = client.request(method, url, **request)
        except httpx.TransportError as exc:
            logger.warning(
                "Node %s: %s %s failed for message %s: %s",
                node.id,
                method,
                url,
                message.correlation_id,
                exc,
            )
            node.report_failure(message, exc)
            return

        logger.info(
            "Node %s: %s %s -> %d %s",
            node.id,
            method,
            url,
            response.status_code,
            response.reason_phrase,
        )
        message.payload = decode_body(response)
        node.next(message)
