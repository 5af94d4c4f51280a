"""
DoctorSettings - tunables for the fixed probe pipeline.

Defaults reproduce the historical behaviour. Every field can be overridden
through a DOCTOR_* environment variable, read once by from_env().
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SettingsError
from .versions import VersionParseError, parse_version

# Upper bound for any probe timeout
MAX_TIMEOUT_SECONDS = 300.0

# Environment variable -> settings field
ENV_VARIABLES = {
    "DOCTOR_MIN_NODE_VERSION": "min_node_version",
    "DOCTOR_GIT_PROBE_URL": "git_probe_url",
    "DOCTOR_NETWORK_TIMEOUT": "network_timeout_seconds",
    "DOCTOR_COMMAND_TIMEOUT": "command_timeout_seconds",
    "DOCTOR_MAVEN_HOME_VARIABLE": "maven_home_variable",
    "DOCTOR_STRICT_COMPANION_CLI": "strict_companion_cli",
}


class DoctorSettings(BaseModel):
    """
    Settings for a doctor run.

    Attributes:
        min_node_version: Lowest accepted Node.js version
        git_probe_url: Repository used by the git connection probe
        network_timeout_seconds: Timeout for network probes
        command_timeout_seconds: Timeout for every other command
        maven_home_variable: Variable that must point at the Maven install
        strict_companion_cli: Fail grunt_cli when grunt-cli is missing from
            the version output instead of passing with a hint
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_node_version: str = "0.10.0"
    git_probe_url: str = "git://github.com/octocat/Spoon-Knife.git"
    network_timeout_seconds: float = Field(default=15.0, gt=0, le=MAX_TIMEOUT_SECONDS, allow_inf_nan=False)
    command_timeout_seconds: float = Field(default=10.0, gt=0, le=MAX_TIMEOUT_SECONDS, allow_inf_nan=False)
    maven_home_variable: str = "M2_HOME"
    strict_companion_cli: bool = False

    @field_validator("min_node_version")
    @classmethod
    def validate_min_node_version(cls, value: str) -> str:
        try:
            parse_version(value)
        except VersionParseError as e:
            raise ValueError(str(e)) from e
        return value

    @field_validator("git_probe_url", "maven_home_variable")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DoctorSettings":
        """
        Build settings from DOCTOR_* environment variables.

        Unset variables keep their defaults.

        Raises:
            SettingsError: A variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        values = {
            field: environ[variable]
            for variable, field in ENV_VARIABLES.items()
            if environ.get(variable, "").strip()
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise SettingsError(f"Invalid doctor settings: {e}") from e
