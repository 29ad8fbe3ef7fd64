"""Pydantic models for pulsar-admin."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_TRUST_STORE_TYPE = 'JKS'

_MASK = '******'


class ConfigOverrides(BaseModel):
    """Connection settings supplied on the command line.

    ``None`` means the flag was not given and the properties file decides.
    """

    model_config = ConfigDict(frozen=True)

    service_url: str | None = None
    auth_plugin_class_name: str | None = None
    auth_params: str | None = None
    tls_allow_insecure_connection: bool | None = None
    tls_enable_hostname_verification: bool | None = None
    tls_trust_certs_file_path: str | None = None


class ResolvedConfig(BaseModel):
    """Connection settings after merging CLI flags, properties and defaults."""

    model_config = ConfigDict(frozen=True)

    service_url: str | None = None
    auth_plugin_class_name: str | None = None
    auth_params: str | None = None
    tls_allow_insecure_connection: bool = False
    tls_enable_hostname_verification: bool = False
    tls_trust_certs_file_path: str | None = None
    use_key_store_tls: bool = False
    tls_trust_store_type: str = DEFAULT_TRUST_STORE_TYPE
    tls_trust_store_path: str | None = None
    tls_trust_store_password: str | None = None

    def for_display(self) -> dict[str, object]:
        """Return the settings with secrets masked, for logging."""
        data = self.model_dump()
        for key in ('auth_params', 'tls_trust_store_password'):
            if data[key]:
                data[key] = _MASK
        return data


class ParsedInvocation(BaseModel):
    """The argument vector split around the first command token."""

    model_config = ConfigDict(frozen=True)

    global_args: tuple[str, ...] = ()
    command_name: str | None = None
    command_args: tuple[str, ...] = ()

    @property
    def has_command(self) -> bool:
        return self.command_name is not None


class GlobalFlags(BaseModel):
    """Parsed top-level flags."""

    model_config = ConfigDict(frozen=True)

    overrides: ConfigOverrides = ConfigOverrides()
    help: bool = False
    verbose: bool = False


class FunctionConfig(BaseModel):
    """Definition of a function, source or sink for an in-process run."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    tenant: str = 'public'
    namespace: str = 'default'
    name: str
    class_name: str = Field(validation_alias=AliasChoices('className', 'class_name'))
    inputs: list[str] = []
    output: str | None = Field(default=None, validation_alias=AliasChoices('output', 'sinkTopic'))
    user_config: dict[str, object] = Field(
        default_factory=dict,
        validation_alias=AliasChoices('userConfig', 'user_config'),
    )

    @field_validator('inputs', mode='before')
    @classmethod
    def split_inputs(cls, v: object) -> object:
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @field_validator('name', 'class_name')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate that identifying fields are not empty."""
        if not v.strip():
            msg = 'value cannot be empty'
            raise ValueError(msg)
        return v.strip()

    @property
    def fully_qualified_name(self) -> str:
        return f'{self.tenant}/{self.namespace}/{self.name}'
