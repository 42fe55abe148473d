"""Configuration module for athenalogs."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

REGION_VAR = "AWS_REGION"
KEY_ID_VAR = "AWS_ATHENA_KEY_ID"
ACCESS_KEY_VAR = "AWS_ATHENA_ACCESS_KEY"
OUTPUT_LOCATION_VAR = "ATHENA_OUTPUT_LOCATION"
WORK_GROUP_VAR = "ATHENA_WORK_GROUP"

DEFAULT_OUTPUT_LOCATION = "s3://athena-logs-scratch"
DEFAULT_WORK_GROUP = "primary"


class ConfigurationError(Exception):
    """Raised when required credentials or settings are missing."""


@dataclass
class AthenaSettings:
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    output_location: str = DEFAULT_OUTPUT_LOCATION
    work_group: str = DEFAULT_WORK_GROUP
    poll_interval: float = 1.0
    timeout_seconds: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AthenaSettings":
        """Build settings from environment variables.

        Empty values are treated as missing, so a variable exported as ""
        still fails validation.
        """
        env = os.environ if environ is None else environ
        return cls(
            region=env.get(REGION_VAR) or None,
            access_key_id=env.get(KEY_ID_VAR) or None,
            secret_access_key=env.get(ACCESS_KEY_VAR) or None,
            output_location=env.get(OUTPUT_LOCATION_VAR) or DEFAULT_OUTPUT_LOCATION,
            work_group=env.get(WORK_GROUP_VAR) or DEFAULT_WORK_GROUP,
        )

    def missing(self) -> list[str]:
        """Return the environment variable names whose values are missing."""
        required = [
            (REGION_VAR, self.region),
            (KEY_ID_VAR, self.access_key_id),
            (ACCESS_KEY_VAR, self.secret_access_key),
        ]
        return [name for name, value in required if not value]

    def validate(self) -> None:
        missing = self.missing()
        if missing:
            raise ConfigurationError(
                "Missing Athena credentials. Set the following environment "
                f"variables: {', '.join(missing)}"
            )
        if not self.output_location.startswith("s3://"):
            raise ConfigurationError(
                f"Athena output location must be an s3:// URI, got: {self.output_location}"
            )


@dataclass
class Config:
    athena: AthenaSettings = field(default_factory=AthenaSettings.from_env)
    top_n: int = 10
