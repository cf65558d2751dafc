import os
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

MIN_ASSUME_ROLE_DURATION = 900
MAX_ASSUME_ROLE_DURATION = 43200


@dataclass
class Config:
    """Runtime configuration read from environment variables.

    Environment variables (a ``.env`` file in the working directory is loaded
    by the CLI before this is read):
        - AWS_REGION: Region for STS and IAM clients (falls back to
          AWS_DEFAULT_REGION, then us-east-1)
        - LOG_LEVEL: Logging level (default: INFO)
        - APP_ENV: "production" switches to JSON logs (default: development)
        - ASSUME_ROLE_DURATION_SECONDS: Lifetime of assumed-role credentials
          (default: 3600, 900..43200)

    Credentials themselves are never read here; boto3's default chain
    discovers them.
    """

    aws_region: str = ""
    log_level: str = ""
    app_env: str = ""
    assume_role_duration_seconds: int = 0

    def __post_init__(self):
        self.aws_region = self.aws_region or os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1"
        self.log_level = (self.log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
        self.app_env = (self.app_env or os.getenv("APP_ENV") or "development").lower()

        if not self.assume_role_duration_seconds:
            raw_duration = os.getenv("ASSUME_ROLE_DURATION_SECONDS") or "3600"
            try:
                self.assume_role_duration_seconds = int(raw_duration)
            except ValueError as e:
                raise ValueError(
                    f"Invalid ASSUME_ROLE_DURATION_SECONDS: {raw_duration!r}. Expected an integer number of seconds"
                ) from e

        if not MIN_ASSUME_ROLE_DURATION <= self.assume_role_duration_seconds <= MAX_ASSUME_ROLE_DURATION:
            raise ValueError(
                f"Invalid ASSUME_ROLE_DURATION_SECONDS: {self.assume_role_duration_seconds}. "
                f"Expected a value between {MIN_ASSUME_ROLE_DURATION} and {MAX_ASSUME_ROLE_DURATION}"
            )

    @property
    def use_json_logs(self) -> bool:
        return self.app_env == "production"


def get_config(**overrides) -> Config:
    """Build the configuration, letting explicit values win over the environment."""
    config = Config(**{key: value for key, value in overrides.items() if value})
    logger.debug(
        "Configuration loaded",
        aws_region=config.aws_region,
        log_level=config.log_level,
        app_env=config.app_env,
    )
    return config
