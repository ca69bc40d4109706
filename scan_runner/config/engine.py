"""Flat execution-engine configuration and typed prefixed views over it."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Final

from .application import ApplicationConfiguration
from .errors import ConfigurationParseError
from .namespace import (
    CONFIG_PATH_SEPARATOR,
    ConfigNamespace,
    ConfigOption,
    config_element_parse,
    config_element_path,
)

SCAN_ENGINE_NAMESPACE: Final[str] = "scanrunner"


@dataclass(frozen=True)
class ScanEngineKeys:
    """Engine configuration keys reserved for scan job submission.

    Attributes:
        job_class: Registry name of the scan job a worker task resolves.
        job_module: Module defining the scan job, imported by workers before resolving.
        config_root: Name of the job's configuration namespace root.
        config_keys_prefix: Prefix under which job configuration keys are copied.
    """

    job_class: str
    job_module: str
    config_root: str
    config_keys_prefix: str


def config_scan_engine_keys(engine_namespace: str = SCAN_ENGINE_NAMESPACE) -> ScanEngineKeys:
    """Build the reserved scan job keys under one engine namespace.

    Args:
        engine_namespace: Top-level namespace inside the engine configuration.

    Returns:
        ScanEngineKeys: Reserved key set.

    Raises:
        ValueError: Raised when the namespace is blank.
    """

    normalized_namespace = engine_namespace.strip()
    if not normalized_namespace:
        raise ValueError("engine_namespace must not be blank")
    scan_namespace = f"{normalized_namespace}.scanjob"
    return ScanEngineKeys(
        job_class=f"{scan_namespace}.class",
        job_module=f"{scan_namespace}.class-module",
        config_root=f"{scan_namespace}.conf-root",
        config_keys_prefix=f"{scan_namespace}.conf",
    )


SCAN_ENGINE_KEYS: Final[ScanEngineKeys] = config_scan_engine_keys()


class EngineConfiguration:
    """Flat, mutable string configuration native to the execution engine.

    Holds cluster and runtime settings on the way in and receives merged scan
    job keys on the way out. Instances are not synchronized: each submission
    owns its own instance.
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, str] = {}
        for key, value in (values or {}).items():
            self.config_set(key, str(value))

    def config_get(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def config_set(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not key.strip():
            raise ValueError("key must be a non-blank string")
        if not isinstance(value, str):
            raise TypeError(f"engine configuration values must be strings, got {type(value).__name__} for {key}")
        self._values[key.strip()] = value

    def config_unset(self, key: str) -> None:
        self._values.pop(key, None)

    def config_keys(self, prefix: str = "") -> tuple[str, ...]:
        """Return sorted keys equal to or nested under a dotted prefix."""

        if not prefix:
            return tuple(sorted(self._values))
        nested_prefix = prefix + CONFIG_PATH_SEPARATOR
        return tuple(sorted(key for key in self._values if key == prefix or key.startswith(nested_prefix)))

    def config_as_dict(self) -> dict[str, str]:
        return dict(self._values)

    def config_copy(self) -> EngineConfiguration:
        return EngineConfiguration(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EngineConfiguration({len(self._values)} keys)"


class PrefixedEngineConfiguration:
    """Typed view of one namespace root stored under a prefix of an engine configuration.

    Option `foo.bar` of `root` is stored at `<prefix>.foo.bar` in flat string
    form and read back through the option type.
    """

    def __init__(self, root: ConfigNamespace, prefix: str, engine_config: EngineConfiguration):
        if root is None:
            raise ValueError("root must not be None")
        if engine_config is None:
            raise ValueError("engine_config must not be None")
        if not prefix.strip():
            raise ValueError("prefix must not be blank")

        self._root = root
        self._prefix = prefix.strip()
        self._engine_config = engine_config

    @property
    def root(self) -> ConfigNamespace:
        return self._root

    def config_key_for(self, option: ConfigOption, *umbrella_elements: str) -> str:
        """Return the prefixed engine key for one option of the root.

        Raises:
            ConfigurationParseError: Raised when the option is not declared under the root.
        """

        try:
            relative_path = config_element_path(option, umbrella_elements, relative_to=self._root)
        except ValueError as error:
            raise ConfigurationParseError(str(error), config_key=str(option)) from error
        return f"{self._prefix}{CONFIG_PATH_SEPARATOR}{relative_path}"

    def config_set(self, option: ConfigOption, value: Any, *umbrella_elements: str) -> None:
        key = self.config_key_for(option, *umbrella_elements)
        self._engine_config.config_set(key, option.option_serialize(value))

    def config_get(self, option: ConfigOption, *umbrella_elements: str) -> Any:
        raw_value = self._engine_config.config_get(self.config_key_for(option, *umbrella_elements))
        if raw_value is None:
            return option.default
        return option.option_validate(raw_value)

    def config_to_application_configuration(self) -> ApplicationConfiguration:
        """Rebuild a typed application configuration from the prefixed keys.

        Returns:
            ApplicationConfiguration: Configuration with keys placed back under the root path.

        Raises:
            ConfigurationParseError: Raised when a stored key or value does not fit the root.
        """

        root_path = config_element_path(self._root)
        values: dict[str, Any] = {}
        for key in self._engine_config.config_keys(self._prefix):
            if key == self._prefix:
                continue
            relative_key = key[len(self._prefix) + 1 :]
            identifier = config_element_parse(self._root, relative_key)
            if not isinstance(identifier.element, ConfigOption):
                raise ConfigurationParseError(
                    f"Engine configuration key {key} resolves to namespace [{identifier.element}], not an option",
                    config_key=key,
                )
            absolute_key = f"{root_path}{CONFIG_PATH_SEPARATOR}{relative_key}" if root_path else relative_key
            values[absolute_key] = identifier.element.option_validate(self._engine_config.config_get(key))
        return ApplicationConfiguration(values)
