"""Infrastructure: HarperDB operations API client.

Every operation is a ``POST`` to the instance URL with Basic
authentication and a JSON body ``{"operation": <name>, ...params}``.
httpx exceptions are mapped to :class:`~hdb_helper.exceptions.ApiError`
subclasses here and never escape this module.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from hdb_helper.core.models import ResolvedConfiguration
from hdb_helper.exceptions import ApiConnectionError, ApiOperationError
from hdb_helper.utils import constants

logger = logging.getLogger(__name__)


class ApiClient:
    """Issues operations against the resolved instance.

    Parameters
    ----------
    target:
        Resolved instance URL and credentials for this invocation.
    timeout:
        Request timeout in seconds.
    transport:
        Optional httpx transport, used by tests to avoid the network.
    """

    def __init__(
        self,
        target: ResolvedConfiguration,
        *,
        timeout: float = constants.API_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._target = target
        self._timeout = timeout
        self._transport = transport

    def run(self, operation: str, params: Mapping[str, Any] | None = None) -> Any:
        """Execute *operation* and return the decoded response.

        Raises
        ------
        ApiConnectionError
            When the instance cannot be reached.
        ApiOperationError
            When the instance returns a non-2xx status.
        """
        body: dict[str, Any] = {"operation": operation, **(params or {})}
        logger.info("Running API operation: %s", operation)
        logger.debug("Request body keys: %s", sorted(body))

        try:
            with httpx.Client(
                auth=self._target.auth,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = client.post(self._target.instance_url, json=body)
        except httpx.HTTPError as exc:
            raise ApiConnectionError(
                f"Cannot reach {self._target.instance_url}: {exc}",
                hint="Check the instance URL and your network connection.",
            ) from exc

        if response.is_error:
            raise ApiOperationError(
                f"{operation} failed with HTTP {response.status_code}: "
                f"{response.text.strip() or response.reason_phrase}",
                status_code=response.status_code,
                hint=_hint_for_status(response.status_code),
            )

        try:
            return response.json()
        except ValueError:
            return response.text


def _hint_for_status(status_code: int) -> str | None:
    if status_code in (401, 403):
        return "Check the username and password for this environment."
    if status_code == 404:
        return "Check that the instance URL points at the operations API."
    return None
