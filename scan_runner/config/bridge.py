"""Copy a scan job's application configuration subtree into an engine configuration."""

from __future__ import annotations

import logging

from .application import ApplicationConfiguration
from .engine import SCAN_ENGINE_KEYS, EngineConfiguration, PrefixedEngineConfiguration, ScanEngineKeys
from .errors import ConfigurationPairingError, ConfigurationParseError
from .namespace import ConfigNamespace, ConfigOption, config_element_parse

logger = logging.getLogger(__name__)


def config_validate_pairing(
    app_config: ApplicationConfiguration | None,
    config_root: ConfigNamespace | None,
) -> None:
    """Require application configuration and namespace root to be supplied together.

    Args:
        app_config: Optional application configuration.
        config_root: Optional namespace root for the job configuration.

    Returns:
        None: This function does not return a value.

    Raises:
        ConfigurationPairingError: Raised when exactly one of the two is supplied.
    """

    if app_config is not None and config_root is None:
        raise ConfigurationPairingError(
            "Configuration root must be provided when configuration instance is provided"
        )
    if app_config is None and config_root is not None:
        raise ConfigurationPairingError(
            f"Configuration instance must be provided when configuration root [{config_root.name}] is provided"
        )


def config_copy_job_namespace(
    app_config: ApplicationConfiguration | None,
    config_root: ConfigNamespace | None,
    engine_config: EngineConfiguration,
    engine_keys: ScanEngineKeys = SCAN_ENGINE_KEYS,
) -> PrefixedEngineConfiguration | None:
    """Merge a job's configuration subtree into the engine configuration.

    Every entry of `app_config` inside the declared subtree of `config_root` is
    parsed into a typed option and written to `engine_config` under
    `engine_keys.config_keys_prefix`. All entries are parsed and serialized
    before the first write, so a parse failure leaves `engine_config`
    untouched.

    Args:
        app_config: Job-specific application configuration, or None.
        config_root: Namespace root declared by the job, or None.
        engine_config: Engine configuration mutated in place.
        engine_keys: Reserved scan job keys of the engine configuration.

    Returns:
        PrefixedEngineConfiguration | None: Typed view of the copied keys, or
        None when no job configuration was supplied.

    Raises:
        ConfigurationPairingError: Raised when only one of `app_config` and `config_root` is supplied.
        ConfigurationParseError: Raised when a subtree key does not resolve to an option of the root.
    """

    config_validate_pairing(app_config=app_config, config_root=config_root)
    if engine_config is None:
        raise ValueError("engine_config must not be None")
    if app_config is None or config_root is None:
        return None

    job_view = PrefixedEngineConfiguration(
        root=config_root,
        prefix=engine_keys.config_keys_prefix,
        engine_config=engine_config,
    )

    pending_writes: list[tuple[str, str]] = []
    for relative_key, value in sorted(app_config.config_get_subset(config_root).items()):
        identifier = config_element_parse(config_root, relative_key)
        if not isinstance(identifier.element, ConfigOption):
            raise ConfigurationParseError(
                f"Configuration key {relative_key} resolves to namespace [{identifier.element}], not an option",
                config_key=relative_key,
            )
        engine_key = job_view.config_key_for(identifier.element, *identifier.umbrella_elements)
        pending_writes.append((engine_key, identifier.element.option_serialize(value)))

    engine_config.config_set(engine_keys.config_root, config_root.name)
    for engine_key, serialized_value in pending_writes:
        engine_config.config_set(engine_key, serialized_value)

    logger.debug(
        "Copied %d scan job configuration keys from namespace [%s] under %s",
        len(pending_writes),
        config_root.name,
        engine_keys.config_keys_prefix,
    )
    return job_view
