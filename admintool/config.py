"""Loading the client properties file and resolving connection settings."""

import re
from collections.abc import Iterator, Mapping
from pathlib import Path

from admintool.errors import ConfigError
from admintool.logging import get_logger
from admintool.models import DEFAULT_TRUST_STORE_TYPE, ConfigOverrides, ResolvedConfig

logger = get_logger(__name__)

# Previous-version key for the admin service URL, consulted first.
LEGACY_SERVICE_URL_KEY = 'webServiceUrl'
SERVICE_URL_KEY = 'serviceUrl'

RawConfiguration = Mapping[str, str]

_COMMENT_PREFIXES = ('#', '!')
_WHITESPACE = ' \t\f'
_SEPARATORS = '=:'
_ESCAPE = re.compile(r'\\(u[0-9a-fA-F]{4}|.)', re.DOTALL)
_ESCAPED_CHARS = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}


def _logical_lines(text: str) -> Iterator[str]:
    """Yield non-comment lines with leading blanks removed and continuations joined."""
    pending = ''
    for raw_line in text.splitlines():
        line = raw_line.lstrip(_WHITESPACE)
        if not pending and (not line or line.startswith(_COMMENT_PREFIXES)):
            continue
        trailing = len(line) - len(line.rstrip('\\'))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ''
    if pending:
        yield pending


def _unescape(text: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        token = match.group(1)
        if token == 'u':
            msg = f'malformed \\uxxxx escape in {text!r}'
            raise ValueError(msg)
        if token.startswith('u') and len(token) == 5:
            return chr(int(token[1:], 16))
        return _ESCAPED_CHARS.get(token, token)

    return _ESCAPE.sub(_replace, text)


def split_property_line(line: str) -> tuple[str, str]:
    """Split a logical line into its raw key and value.

    The key ends at the first unescaped ``=``, ``:`` or whitespace; blanks
    and at most one ``=``/``:`` after it are skipped.
    """
    position = 0
    while position < len(line):
        char = line[position]
        if char == '\\':
            position += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        position += 1
    key = line[:position]
    value = line[position:].lstrip(_WHITESPACE)
    if value[:1] and value[0] in _SEPARATORS:
        value = value[1:].lstrip(_WHITESPACE)
    return key, value


def parse_properties(text: str, *, source: str = '<string>') -> dict[str, str]:
    """Parse properties text into an ordered dict.

    Keys keep their case and are separated from values by ``=``, ``:`` or
    whitespace. ``#`` and ``!`` start comment lines, a later duplicate wins
    and a key with no value maps to an empty string.
    """
    properties: dict[str, str] = {}
    for line in _logical_lines(text):
        raw_key, raw_value = split_property_line(line)
        try:
            key, value = _unescape(raw_key), _unescape(raw_value)
        except ValueError as exc:
            msg = f'failed to parse properties from {source}: {exc}'
            raise ConfigError(msg) from exc
        if not key:
            msg = f'failed to parse properties from {source}: missing key in {line!r}'
            raise ConfigError(msg)
        properties[key] = value
    return properties


def load_properties(config_path: Path) -> dict[str, str]:
    """Read and parse a properties file."""
    logger.debug('loading_properties', config=str(config_path))
    try:
        text = config_path.read_bytes().decode('utf-8')
    except UnicodeDecodeError as exc:
        msg = f'properties file is not valid UTF-8: {config_path}'
        raise ConfigError(msg) from exc
    except OSError as exc:
        msg = f'cannot read properties file {config_path}: {exc.strerror or exc}'
        raise ConfigError(msg) from exc
    return parse_properties(text, source=str(config_path))


def parse_property_bool(value: str | None, *, default: bool = False) -> bool:
    """Interpret a property value the way ``Boolean.parseBoolean`` does."""
    if value is None:
        return default
    return value.strip().lower() == 'true'


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _first_not_blank(*candidates: str | None) -> str | None:
    for candidate in candidates:
        if not _is_blank(candidate):
            return candidate
    return None


def _resolve_bool(override: bool | None, properties: RawConfiguration, key: str) -> bool:
    if override is not None:
        return override
    return parse_property_bool(properties.get(key), default=False)


def resolve_service_url(properties: RawConfiguration, override: str | None = None) -> str | None:
    """Pick the admin URL: CLI value, then the legacy key, then the current key."""
    if not _is_blank(override):
        return override
    legacy = properties.get(LEGACY_SERVICE_URL_KEY)
    if not _is_blank(legacy):
        return legacy
    return properties.get(SERVICE_URL_KEY)


def resolve_config(
    properties: RawConfiguration,
    overrides: ConfigOverrides | None = None,
) -> ResolvedConfig:
    """Merge CLI overrides, properties and defaults into one record.

    Never raises: unknown or malformed values fall back to their defaults.
    """
    overrides = overrides or ConfigOverrides()
    auth_plugin = overrides.auth_plugin_class_name
    auth_params = overrides.auth_params

    config = ResolvedConfig(
        service_url=resolve_service_url(properties, overrides.service_url),
        auth_plugin_class_name=auth_plugin if auth_plugin is not None else properties.get('authPlugin'),
        auth_params=auth_params if auth_params is not None else properties.get('authParams'),
        tls_allow_insecure_connection=_resolve_bool(
            overrides.tls_allow_insecure_connection,
            properties,
            'tlsAllowInsecureConnection',
        ),
        tls_enable_hostname_verification=_resolve_bool(
            overrides.tls_enable_hostname_verification,
            properties,
            'tlsEnableHostnameVerification',
        ),
        tls_trust_certs_file_path=_first_not_blank(
            overrides.tls_trust_certs_file_path,
            properties.get('tlsTrustCertsFilePath'),
        ),
        use_key_store_tls=parse_property_bool(properties.get('useKeyStoreTls')),
        tls_trust_store_type=properties.get('tlsTrustStoreType', DEFAULT_TRUST_STORE_TYPE),
        tls_trust_store_path=properties.get('tlsTrustStorePath'),
        tls_trust_store_password=properties.get('tlsTrustStorePassword'),
    )
    logger.debug('resolved_config', _verbose_config=config.for_display())
    return config


__all__ = [
    'LEGACY_SERVICE_URL_KEY',
    'SERVICE_URL_KEY',
    'RawConfiguration',
    'load_properties',
    'parse_properties',
    'parse_property_bool',
    'resolve_config',
    'resolve_service_url',
    'split_property_line',
]
