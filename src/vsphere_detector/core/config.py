"""Configuration management for the detector."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from vsphere_detector.core.exceptions import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 10.0

# Lower bound on the time allowed for vCenter login, whatever the run timeout.
CONNECT_TIMEOUT_FLOOR = 1.0


class VSphereConfig(BaseModel):
    """Connection and workspace settings for vCenter."""

    server: str = Field(..., description="vCenter host name or address")
    port: int = 443
    user: str
    password: str
    insecure: bool = False
    datacenter: str = Field(..., description="Datacenter that holds the cluster VMs")


class KubernetesConfig(BaseModel):
    """Kubernetes API access settings."""

    kubeconfig_path: str | None = None
    context: str | None = None


class RunConfig(BaseModel):
    """Settings for a single run of all checks."""

    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        ge=0,
        description="Time budget shared by every remote call in a run",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    output: str = "stdout"


class DetectorConfig(BaseModel):
    """Main detector configuration."""

    vsphere: VSphereConfig
    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "DetectorConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            DetectorConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

        try:
            return cls(**data)
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation
        """
        return self.model_dump()
