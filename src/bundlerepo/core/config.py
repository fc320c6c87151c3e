"""
bundlerepo.core.config - Repository Configuration
===================================================

Configuration for a repository can be loaded from several sources with the
following priority (highest first):

    1. Explicit constructor arguments, plugin properties, or the values of a
       YAML configuration file (bundlerepo.yaml) read by load_config
    2. Environment variables (prefixed with BUNDLEREPO_)
    3. Default values defined below

A build tool usually hands a plugin a flat string→string property map; use
:meth:`RepositoryConfig.from_properties` for that:

    {"local": "/srv/repo", "type": "R5", "overwrite": "false"}

Write Mode vs. Read-Only Mode:
    ``local`` set      → LocalIndexedRepository (writes into ``local``)
    ``locations`` set  → FixedIndexedRepository (reads existing indexes)

Environment Variables:
    BUNDLEREPO_LOCAL=/srv/repo
    BUNDLEREPO_TYPE=R5
    BUNDLEREPO_OVERWRITE=false
    BUNDLEREPO_LOCK=true
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from bundlerepo.core.enums import ConflictPolicy
from bundlerepo.core.exceptions import ConfigurationError


DEFAULT_CONFIG_FILE = "bundlerepo.yaml"

# Camel-case property names accepted from build tool configuration
_PROPERTY_ALIASES = {
    "indexName": "index_name",
    "conflictPolicy": "conflict_policy",
    "lockTimeout": "lock_timeout",
    "logLevel": "log_level",
}


# =============================================================================
# Repository Configuration
# =============================================================================
class RepositoryConfig(BaseSettings):
    """Configuration of one repository instance.

    Attributes:
        name: Repository name, returned by ``get_name()``.
        local: Root directory of a writable repository. Must exist (and be
            writable) for put(); reads only require it to exist.
        type: Key of the content index generator to use (e.g. "R5").
        overwrite: When False, putting byte-identical content for an
            identity that is already stored is a no-op.
        conflict_policy: What to do under ``overwrite=False`` when the
            incoming content differs from the stored file.
        pretty: Ask the generator for a human-readable index.
        index_name: Override of the generator's default index filename.
        locations: Index files (paths or ``file:`` URIs) for the read-only
            repository.
        lock: Serialize store+regenerate through an advisory file lock.
        lock_timeout: Seconds to wait for that lock.
        options: Generator-specific passthrough options.
        log_level: Logging level used by ``configure_logging``.

    Example:
        >>> config = RepositoryConfig(local=Path("/srv/repo"), overwrite=False)
    """

    name: str = Field(
        default="local",
        min_length=1,
        description="Repository name",
    )
    local: Optional[Path] = Field(
        default=None,
        description="Root directory of a writable repository",
    )
    type: str = Field(
        default="R5",
        min_length=1,
        description="Content index generator key",
    )
    overwrite: bool = Field(
        default=True,
        description="Overwrite existing artifacts with identical content",
    )
    conflict_policy: ConflictPolicy = Field(
        default=ConflictPolicy.SKIP,
        description="Behaviour for different content when overwrite is False",
    )
    pretty: bool = Field(
        default=False,
        description="Generate a human-readable (uncompressed, indented) index",
    )
    index_name: Optional[str] = Field(
        default=None,
        description="Index filename override",
    )
    locations: list[str] = Field(
        default_factory=list,
        description="Index locations for read-only repositories",
    )
    lock: bool = Field(
        default=False,
        description="Use an advisory file lock around store + regenerate",
    )
    lock_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds to wait for the advisory lock",
    )
    options: dict[str, str] = Field(
        default_factory=dict,
        description="Generator-specific passthrough options",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------
    model_config = {
        "env_prefix": "BUNDLEREPO_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> RepositoryConfig:
        """Build a config from a flat plugin property map.

        Known keys map onto fields (camelCase aliases accepted); ``locations``
        may be a comma-separated string; every other key is kept in
        ``options`` for the generator.

        Raises:
            ConfigurationError: If a known property has an invalid value.
        """
        known = set(cls.model_fields) - {"options"}
        values: dict[str, Any] = {}
        options: dict[str, str] = {}

        for key, value in properties.items():
            field_name = _PROPERTY_ALIASES.get(key, key)
            if field_name == "locations" and isinstance(value, str):
                values["locations"] = [
                    location.strip() for location in value.split(",") if location.strip()
                ]
            elif field_name == "options" and isinstance(value, Mapping):
                options.update({k: str(v) for k, v in value.items()})
            elif field_name in known:
                values[field_name] = value
            else:
                options[key] = str(value)

        if options:
            values["options"] = options
        return _validated(cls, values)


def _validated(cls: type[RepositoryConfig], values: dict[str, Any]) -> RepositoryConfig:
    try:
        return cls(**values)
    except ValidationError as e:
        raise ConfigurationError(
            message=f"Invalid repository configuration: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None) -> RepositoryConfig:
    """Load a repository configuration from YAML and/or environment variables.

    Args:
        path: Path to a YAML file. If None, ``bundlerepo.yaml`` in the current
            directory is used when present; otherwise only defaults and
            environment variables apply.

    Returns:
        A validated RepositoryConfig.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigurationError: If the YAML is malformed or holds invalid values.
    """
    if path is None:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path) as f:
            try:
                raw_data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    message=f"Malformed YAML in {path}",
                    details={"path": path, "reason": str(e)},
                ) from e
            if isinstance(raw_data, dict):
                yaml_data = raw_data

    return RepositoryConfig.from_properties(yaml_data)
