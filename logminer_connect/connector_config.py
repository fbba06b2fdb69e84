"""Source connector configuration."""

from datetime import timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from logminer_connect.connection_acquirer import acquire_connection
from logminer_connect.exceptions import ConfigurationInvalid
from logminer_connect.models.acquisition_outcome import AcquisitionOutcome
from logminer_connect.models.capture_target import CaptureTarget
from logminer_connect.models.connection_parameters import ConnectionParameters
from logminer_connect.models.dictionary_source import LogminerDictionarySource
from logminer_connect.models.retry_policy import RetryPolicy
from logminer_connect.scope_resolver import resolve_capture_targets, split_whitelist


class SourceConnectorConfig(BaseModel):
    """Validated connector properties, keyed by their dotted property names."""

    db_name: str = Field(
        ...,
        alias="db.name",
        description="Logical name of the database. This name will be used as a prefix for the topic.",
        json_schema_extra={"importance": "HIGH"},
    )
    db_sid: str = Field(
        ...,
        alias="db.sid",
        description="Database SID",
        json_schema_extra={"importance": "HIGH"},
    )
    db_hostname: str = Field(
        ...,
        alias="db.hostname",
        description="Database hostname",
        json_schema_extra={"importance": "HIGH"},
    )
    db_port: int = Field(
        ...,
        alias="db.port",
        description="Database port (usually 1521)",
        json_schema_extra={"importance": "HIGH"},
    )
    db_user: str = Field(
        ...,
        alias="db.user",
        description="Database user",
        json_schema_extra={"importance": "HIGH"},
    )
    db_password: SecretStr = Field(
        ...,
        alias="db.user.password",
        description="Database password",
        json_schema_extra={"importance": "HIGH"},
    )
    logminer_dictionary: LogminerDictionarySource = Field(
        LogminerDictionarySource.ONLINE,
        alias="db.logminer.dictionary",
        description="Type of logminer dictionary that should be used. Valid values: "
        + ", ".join(source.name for source in LogminerDictionarySource),
        json_schema_extra={"importance": "LOW"},
    )
    db_timezone: str = Field(
        "UTC",
        alias="db.timezone",
        description="The timezone in which TIMESTAMP columns (without any timezone information) should be interpreted. "
        "Valid values are IANA zone identifiers such as 'Europe/Berlin'.",
        json_schema_extra={"importance": "HIGH"},
    )
    table_whitelist: str = Field(
        "",
        alias="table.whitelist",
        description="Tables that should be monitored, separated by ','. Tables have to be specified with schema. "
        "Table names are case-sensitive (e.g. if your table name is an unquoted identifier, you'll need to specify "
        "it in all caps). You can also just specify a schema to indicate that all tables within that schema should "
        "be monitored. Examples: 'MY_USER.TABLE, OTHER_SCHEMA'.",
        json_schema_extra={"importance": "HIGH"},
    )
    tombstones_on_delete: bool = Field(
        True,
        alias="tombstones.on.delete",
        description="If set to false, no tombstone records will be emitted after a delete operation.",
        json_schema_extra={"importance": "HIGH"},
    )
    batch_size: int = Field(
        1000,
        ge=1,
        alias="batch.size",
        description="Batch size of rows that should be fetched in one batch",
        json_schema_extra={"importance": "HIGH"},
    )
    db_fetch_size: Optional[int] = Field(
        None,
        ge=1,
        alias="db.fetch.size",
        description="Result set prefetch size. If not set, it will be defaulted to batch.size. "
        "The fetch should not be smaller than the batch size.",
        json_schema_extra={"importance": "MEDIUM"},
    )
    start_scn: Optional[int] = Field(
        0,
        ge=0,
        alias="start.scn",
        description="Start SCN, if set to 0 an initial intake from the tables will be performed.",
        json_schema_extra={"importance": "HIGH"},
    )
    db_attempts: int = Field(
        3,
        ge=1,
        alias="db.attempts",
        description="Maximum number of attempts to retrieve a valid database connection.",
        json_schema_extra={"importance": "LOW"},
    )
    db_backoff_ms: int = Field(
        10000,
        ge=0,
        alias="db.backoff.ms",
        description="Backoff time in milliseconds between connection attempts.",
        json_schema_extra={"importance": "LOW"},
    )
    poll_interval_ms: int = Field(
        2000,
        ge=0,
        alias="poll.interval.ms",
        description="Number of milliseconds the connector should wait after a polling attempt didn't retrieve any results.",
        json_schema_extra={"importance": "LOW"},
    )

    class Config:
        """Pydantic config."""

        frozen = True
        extra = "ignore"
        populate_by_name = True

    @field_validator("db_timezone")
    @classmethod
    def _valid_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"unknown timezone '{value}'") from e
        return value

    @classmethod
    def from_properties(cls, properties: Dict[str, Any]) -> "SourceConnectorConfig":
        """Build the configuration from raw connector properties.

        Args:
            properties: Property values keyed by dotted name (e.g. "db.hostname").

        Returns:
            SourceConnectorConfig: The validated configuration.

        Raises:
            ConfigurationInvalid: If a required key is missing or a value is invalid.
        """
        try:
            config = cls.model_validate(properties)
        except ValidationError as e:
            keys = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            details = "; ".join(
                f"{key}: {error['msg']}" for key, error in zip(keys, e.errors())
            )
            logger.error(f"[CONFIG] Invalid connector configuration: {details}")
            raise ConfigurationInvalid(
                f"Invalid connector configuration: {details}", keys=keys
            ) from e

        logger.debug(
            f"[CONFIG] Loaded configuration for {config.db_name} ({config.connection_parameters.address})"
        )
        logger.debug(
            "[CONFIG] Capture targets: "
            + ", ".join(target.describe() for target in config.capture_targets)
        )
        return config

    # Derived values
    # =====================================================================
    @property
    def fetch_size(self) -> int:
        """The prefetch size, falling back to the batch size when unset."""
        return self.db_fetch_size if self.db_fetch_size is not None else self.batch_size

    @property
    def effective_start_scn(self) -> int:
        """The SCN to start from; 0 means a full initial capture."""
        return self.start_scn or 0

    @property
    def zone_id(self) -> ZoneInfo:
        return ZoneInfo(self.db_timezone)

    @property
    def poll_interval(self) -> timedelta:
        return timedelta(milliseconds=self.poll_interval_ms)

    @property
    def backoff(self) -> timedelta:
        return timedelta(milliseconds=self.db_backoff_ms)

    @property
    def monitored_tables(self) -> List[str]:
        return split_whitelist(self.table_whitelist)

    @property
    def capture_targets(self) -> List[CaptureTarget]:
        """The whitelist resolved into capture targets, recomputed on each access."""
        return resolve_capture_targets(self.table_whitelist)

    @property
    def connection_parameters(self) -> ConnectionParameters:
        return ConnectionParameters(
            host=self.db_hostname,
            port=self.db_port,
            sid=self.db_sid,
            username=self.db_user,
            password=self.db_password,
        )

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.db_attempts, backoff=self.backoff)

    # Connection Management
    # =====================================================================
    def acquire_connection(self, **kwargs) -> AcquisitionOutcome:
        """Acquire a connection using the configured retry policy.

        Args:
            **kwargs: Passed to ``acquire_connection`` (connect, sleep, log, retry_on).

        Returns:
            AcquisitionOutcome: The live connection or the unavailable result.
        """
        return acquire_connection(
            self.connection_parameters, self.retry_policy, **kwargs
        )

    def open_connection(self, **kwargs) -> Optional[Any]:
        """Open a connection, or return None once the retry policy is spent.

        The caller owns the returned connection and must close it.
        """
        return self.acquire_connection(**kwargs).connection
