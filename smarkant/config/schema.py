"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class SkillConfig(BaseModel):
    """Voice skill binding configuration."""

    model_config = ConfigDict(frozen=True)

    application_id: str = ""  # Skill id; requests from other applications are rejected when set
    fallback_locale: str = ""  # Used for unsupported request locales, empty = reject them
    verify_timestamp: bool = True
    timestamp_tolerance_seconds: int = 150


class ShadowConfig(BaseModel):
    """Device shadow transport configuration."""

    model_config = ConfigDict(frozen=True)

    transport: str = "mqtt"  # mqtt | mock
    endpoint: str = ""  # Full host name, or the account prefix when region is set
    region: str = ""  # e.g. "eu-west-1"
    port: int = 8883
    thing_name: str = "smarkant"
    client_id: str = "smarkant-skill"
    ca_cert_path: str = ""
    cert_path: str = ""
    key_path: str = ""
    username: str = ""
    password: str = ""
    tls_enabled: bool = True
    qos: int = 1
    keepalive_seconds: int = 30
    reconnect_min_seconds: int = 1
    reconnect_max_seconds: int = 30
    connect_timeout_seconds: float = 10.0
    ack_timeout_seconds: float = 5.0
    update_topic_template: str = "$aws/things/{thing_name}/shadow/update"

    def resolve_host(self) -> str:
        """Return the broker host, expanding an endpoint prefix with the region."""
        endpoint = self.endpoint.strip()
        if not endpoint:
            raise ValueError("shadow.endpoint is not configured")
        region = self.region.strip()
        if region and "." not in endpoint:
            return f"{endpoint}-ats.iot.{region}.amazonaws.com"
        return endpoint

    def update_topic(self, thing_name: str | None = None) -> str:
        return self.update_topic_template.format(thing_name=thing_name or self.thing_name)


class ServerConfig(BaseModel):
    """Webhook server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 18795
    path: str = "/alexa"
    max_body_bytes: int = 256 * 1024
    request_timeout_seconds: float = 8.0


class Config(BaseSettings):
    """Root configuration for smarkant."""
    skill: SkillConfig = Field(default_factory=SkillConfig)
    shadow: ShadowConfig = Field(default_factory=ShadowConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    model_config = ConfigDict(
        env_prefix="SMARKANT_",
        env_nested_delimiter="__"
    )
