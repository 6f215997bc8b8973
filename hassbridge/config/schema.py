"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

from hassbridge import __version__


class BridgeConfig(BaseModel):
    """Identity this bridge advertises to peers."""
    version: str = __version__
    version_header: str = "HA-Cloud-Version"  # Empty string disables the header


class ForwardingConfig(BaseModel):
    """Webhook forwarding behavior."""

    retry_delay_seconds: float = 3.0  # Wait before re-sending after an empty 200 reply
    timeout_seconds: float = 10.0  # Deadline handed to the network facade per send
    content_type: str = "application/json"


class DiscoveryConfig(BaseModel):
    """mDNS discovery record conventions."""

    service_suffix: str = "._home-assistant._tcp.local"
    version_key: str = "version"
    uuid_key: str = "uuid"


class GatesConfig(BaseModel):
    """Minimum peer versions per gated intent, as "major.minor"."""

    proxy_selected_min_version: str = "2022.3"


class LoggingConfig(BaseModel):
    """Loguru sink settings for the CLI."""

    level: str = "INFO"
    diagnose: bool = False


class Config(BaseSettings):
    """Root configuration for hassbridge."""
    bridge: BridgeConfig = Field(default_factory=BridgeConfig)
    forwarding: ForwardingConfig = Field(default_factory=ForwardingConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    gates: GatesConfig = Field(default_factory=GatesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    peers: dict[str, str] = Field(default_factory=dict)  # device id -> host, standalone facade only

    model_config = ConfigDict(
        env_prefix="HASSBRIDGE_",
        env_nested_delimiter="__"
    )
