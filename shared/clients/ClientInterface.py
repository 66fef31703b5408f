from abc import ABC, abstractmethod
from typing import Any

import httpx
from httpx._types import QueryParamTypes

from shared.errors import ServiceUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class ClientInterface(ABC):
    """Base of every backend client.

    A client owns one httpx.AsyncClient (created by boot(), released by
    close()) and reads its settings from "<TYPE>_<ENGINE>_<KEY>" environment
    variables, e.g. RAG_QDRANT_BASE_URL. Settings are resolved once, at
    construction, so a misconfigured client fails before any request.
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self.timeout = float(helper_config.get_number_val(f"{self.get_client_type().upper()}_TIMEOUT", default=30.0))
        self._settings: dict[str, Any] = {
            config.env_key: self.get_config_val(config.env_key, default=config.default, val_type=config.val_type)
            for config in self._get_required_config()
        }
        self._client: httpx.AsyncClient | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def get_client_type(self) -> str:
        return self._get_client_type().lower()

    @abstractmethod
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "rag"
        """
        pass

    def get_engine_name(self) -> str:
        return self._get_engine_name().lower()

    @abstractmethod
    def _get_engine_name(self) -> str:
        """
        Returns the backend the client talks to. E.g. "Qdrant"
        """
        pass

    def get_service_name(self) -> str:
        """
        Returns "<type>/<engine>" for error tagging and log lines. E.g. "rag/qdrant"
        """
        return f"{self.get_client_type()}/{self.get_engine_name()}"

    def is_booted(self) -> bool:
        return self._client is not None

    ################ CONFIG ##################
    @abstractmethod
    def _get_required_config(self) -> list[EnvConfig]:
        """
        Returns the settings the client reads from the environment, keyed
        without the "<TYPE>_<ENGINE>_" prefix. A None default marks a setting
        as mandatory.
        """
        pass

    def get_config_val(self, raw_key: str, default: Any = None, val_type: str = "string") -> Any:
        """Read one client setting, e.g. raw_key "BASE_URL" → RAG_QDRANT_BASE_URL.

        Raises:
            ValueError: If the setting is mandatory and unset, or val_type is unknown.
        """
        key = f"{self.get_client_type().upper()}_{self.get_engine_name().upper()}_{raw_key.upper()}"
        if val_type == "string":
            return self._helper_config.get_string_val(key, default=default)
        if val_type == "number":
            return self._helper_config.get_number_val(key, default=default)
        raise ValueError(f"Unsupported value type '{val_type}' for setting '{key}' of {self.get_service_name()}.")

    def get_setting(self, raw_key: str) -> Any:
        return self._settings[raw_key.upper()]

    ################ AUTH ##################
    @abstractmethod
    def _get_auth_header(self) -> dict:
        """
        Returns the auth header for the backend, or an empty dict when no API key is set.
        """
        pass

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self.get_setting("BASE_URL").rstrip("/")

    @abstractmethod
    def _get_endpoint_healthcheck(self) -> str:
        """
        Returns the path probed by do_healthcheck(). E.g. "/healthz"
        """
        pass

    ##########################################
    ############### LIFECYCLE ################
    ##########################################

    async def boot(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        """Create the HTTP client. Tests pass an httpx.MockTransport."""
        self._client = httpx.AsyncClient(
            headers=self._get_auth_header(),
            timeout=self.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> httpx.Response:
        """Probe the backend.

        Raises:
            ServiceUnavailableError: If the backend is unreachable or answers non-2xx.
        """
        response = await self.do_request("GET", self._get_endpoint_healthcheck(), raise_on_error=True)
        self.logging.info("%s health check passed.", self.get_service_name())
        return response

    async def do_request(
        self,
        method: str,
        endpoint: str = "",
        json: Any = None,
        params: QueryParamTypes | None = None,
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send one request to the backend.

        Args:
            method: HTTP method.
            endpoint: Path below the base URL; "" targets the base URL itself.
            json: JSON body, if any.
            params: URL query parameters.
            raise_on_error: Treat a non-2xx status as a failure.

        Returns:
            The raw httpx.Response.

        Raises:
            RuntimeError: If boot() was not called.
            ServiceUnavailableError: On connection errors and timeouts, and on
                non-2xx statuses when raise_on_error is set.
        """
        if self._client is None:
            raise RuntimeError(f"{self.get_service_name()} client is not booted. Call boot() before making requests.")

        path = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""
        url = f"{self._get_base_url()}{path}"

        try:
            response = await self._client.request(method, url, json=json, params=params)
        except httpx.HTTPError as exc:
            self.logging.error("%s %s failed: %s", method, url, exc)
            raise ServiceUnavailableError(f"{method} {url} failed: {exc!r}", service=self.get_service_name()) from exc

        if raise_on_error and not response.is_success:
            self.logging.error("%s %s returned %d: %s", method, url, response.status_code, response.text[:200])
            raise ServiceUnavailableError(
                f"{method} {url} returned status {response.status_code}",
                service=self.get_service_name(),
                status_code=response.status_code,
            )
        return response
