"""Admin REST client and the builder that turns resolved settings into one.

The dispatcher only depends on :class:`AdminClientBuilder`; tests substitute
their own builder to observe or fail client construction.
"""

import json
import ssl
from collections.abc import Generator
from pathlib import Path
from typing import Any, Final, Protocol
from urllib.parse import urlparse

import httpx

from admintool import __version__
from admintool.errors import AdminApiError, ClientConstructionError
from admintool.logging import get_logger
from admintool.models import ResolvedConfig

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

TOKEN_AUTH_PLUGINS = frozenset(
    {
        'org.apache.pulsar.client.impl.auth.AuthenticationToken',
        'AuthenticationToken',
        'token',
    },
)
BASIC_AUTH_PLUGINS = frozenset(
    {
        'org.apache.pulsar.client.impl.auth.AuthenticationBasic',
        'AuthenticationBasic',
        'basic',
    },
)


class _NoClient:
    """Stands in for the admin client when running locally."""

    _instance: '_NoClient | None' = None

    def __new__(cls) -> '_NoClient':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return 'NO_CLIENT'


NO_CLIENT: Final = _NoClient()


class AdminClient:
    """Thin JSON wrapper over an ``httpx.Client`` bound to the admin URL."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    @property
    def base_url(self) -> str:
        return str(self._http.base_url)

    def request(self, method: str, path: str, *, payload: Any = None) -> Any:
        """Send a request and decode the JSON body, or return None when empty."""
        logger.debug('admin_request', method=method, path=path)
        try:
            response = self._http.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            msg = f'{method} {path} failed: {exc}'
            raise AdminApiError(msg) from exc

        if response.is_error:
            raise AdminApiError(_error_reason(response), status_code=response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> 'AdminClient':
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _error_reason(response: httpx.Response) -> str:
    reason = response.reason_phrase or 'error'
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get('reason'):
        reason = str(body['reason'])
    return f'{reason} (HTTP {response.status_code})'


class TokenAuth(httpx.Auth):
    """Bearer token authentication."""

    def __init__(self, token: str) -> None:
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers['Authorization'] = f'Bearer {self._token}'
        yield request


def parse_auth_params(auth_params: str | None) -> dict[str, str]:
    """Parse ``{"k":"v"}`` JSON or ``k1:v1,k2:v2`` into a dict."""
    if not auth_params or not auth_params.strip():
        return {}
    text = auth_params.strip()
    if text.startswith('{'):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f'invalid JSON authentication parameters: {exc}'
            raise ClientConstructionError(msg) from exc
        return {str(key): str(value) for key, value in data.items()}

    params: dict[str, str] = {}
    for pair in text.split(','):
        key, sep, value = pair.partition(':')
        if not sep:
            msg = f'malformed authentication parameter "{pair}", expected key:value'
            raise ClientConstructionError(msg)
        params[key.strip()] = value.strip()
    return params


def _read_token_file(location: str) -> str:
    path = Path(urlparse(location).path) if location.startswith('file:') else Path(location)
    try:
        return path.read_text().strip()
    except OSError as exc:
        msg = f'cannot read token file {path}: {exc.strerror or exc}'
        raise ClientConstructionError(msg) from exc


def build_token_auth(auth_params: str | None) -> TokenAuth:
    """Token plugin params: ``token:<jwt>``, ``file:///path`` or the raw token."""
    text = (auth_params or '').strip()
    if text.startswith('token:'):
        token = text[len('token:') :]
    elif text.startswith('file:'):
        token = _read_token_file(text)
    elif text.startswith('{'):
        token = parse_auth_params(text).get('token', '')
    else:
        token = text
    if not token:
        msg = 'token authentication requires a token'
        raise ClientConstructionError(msg)
    return TokenAuth(token)


def build_basic_auth(auth_params: str | None) -> httpx.BasicAuth:
    params = parse_auth_params(auth_params)
    if 'userId' not in params or 'password' not in params:
        msg = 'basic authentication requires userId and password'
        raise ClientConstructionError(msg)
    return httpx.BasicAuth(params['userId'], params['password'])


def build_authentication(plugin: str | None, auth_params: str | None) -> httpx.Auth | None:
    """Map an authentication plugin name onto an ``httpx.Auth``."""
    if not plugin or not plugin.strip():
        return None
    plugin = plugin.strip()
    if plugin in TOKEN_AUTH_PLUGINS:
        return build_token_auth(auth_params)
    if plugin in BASIC_AUTH_PLUGINS:
        return build_basic_auth(auth_params)
    msg = f'unsupported authentication plugin: {plugin}'
    raise ClientConstructionError(msg)


def build_ssl_context(config: ResolvedConfig) -> ssl.SSLContext:
    """TLS settings for an https admin URL."""
    if config.use_key_store_tls:
        msg = f'key store TLS ({config.tls_trust_store_type}) is not supported; use tlsTrustCertsFilePath'
        raise ClientConstructionError(msg)
    try:
        context = ssl.create_default_context(cafile=config.tls_trust_certs_file_path)
    except (OSError, ssl.SSLError) as exc:
        msg = f'cannot load trust certificates from {config.tls_trust_certs_file_path}: {exc}'
        raise ClientConstructionError(msg) from exc

    if config.tls_allow_insecure_connection:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    else:
        context.check_hostname = config.tls_enable_hostname_verification
    return context


class AdminClientBuilder(Protocol):
    """Produces a connected admin client from resolved settings."""

    def build(self, config: ResolvedConfig) -> AdminClient: ...


class HttpAdminClientBuilder:
    """Default builder producing an httpx-backed :class:`AdminClient`."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT_SECONDS, transport: httpx.BaseTransport | None = None) -> None:
        self.timeout = timeout
        self.transport = transport

    def build(self, config: ResolvedConfig) -> AdminClient:
        service_url = (config.service_url or '').strip()
        if not service_url:
            msg = 'admin service URL is not configured (set webServiceUrl or pass --admin-url)'
            raise ClientConstructionError(msg)

        parsed = urlparse(service_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            msg = f'invalid admin service URL: {service_url}'
            raise ClientConstructionError(msg)

        verify: ssl.SSLContext | bool = True
        if parsed.scheme == 'https':
            verify = build_ssl_context(config)

        auth = build_authentication(config.auth_plugin_class_name, config.auth_params)
        logger.info('building_admin_client', service_url=service_url, _verbose_auth=bool(auth))

        http = httpx.Client(
            base_url=service_url,
            auth=auth,
            verify=verify,
            timeout=httpx.Timeout(self.timeout),
            headers={'User-Agent': f'pulsar-admin/{__version__}', 'Accept': 'application/json'},
            transport=self.transport,
        )
        return AdminClient(http)


__all__ = [
    'NO_CLIENT',
    'AdminClient',
    'AdminClientBuilder',
    'HttpAdminClientBuilder',
    'TokenAuth',
    'build_authentication',
    'build_ssl_context',
    'parse_auth_params',
]
