"""Hierarchical application configuration read by scan jobs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .namespace import CONFIG_PATH_SEPARATOR, ConfigNamespace, ConfigOption, config_element_path


class ApplicationConfiguration:
    """Read-only hierarchical configuration keyed by dotted paths.

    Nested mappings are flattened on construction, so `{"foo": {"bar": 42}}`
    and `{"foo.bar": 42}` describe the same configuration.
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = config_flatten_mapping(values or {})

    def config_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._values))

    def config_get(self, option: ConfigOption, *umbrella_elements: str) -> Any:
        """Return the typed value of one option, or its default when unset.

        Args:
            option: Declared configuration option.
            umbrella_elements: User-defined names for umbrella namespaces on the option path.

        Returns:
            Any: Value coerced to the option type.

        Raises:
            ConfigurationParseError: Raised when the stored value does not fit the option type.
        """

        key = config_element_path(option, umbrella_elements)
        if key not in self._values:
            return option.default
        return option.option_validate(self._values[key])

    def config_get_subset(self, namespace: ConfigNamespace, *umbrella_elements: str) -> dict[str, Any]:
        """Return the entries inside the declared subtree of a namespace.

        Keys are returned relative to `namespace`. An entry lies inside the
        subtree when its first relative component names a child declared by the
        namespace, or when the namespace is an umbrella.

        Args:
            namespace: Namespace whose subtree is read.
            umbrella_elements: User-defined names for umbrella namespaces on the namespace path.

        Returns:
            dict[str, Any]: Relative key to raw value mapping.

        Raises:
            ValueError: Raised when umbrella elements do not fit the namespace path.
        """

        prefix = config_element_path(namespace, umbrella_elements)
        subset: dict[str, Any] = {}
        for key, value in self._values.items():
            if prefix:
                if not key.startswith(prefix + CONFIG_PATH_SEPARATOR):
                    continue
                relative_key = key[len(prefix) + 1 :]
            else:
                relative_key = key

            first_component = relative_key.split(CONFIG_PATH_SEPARATOR, 1)[0]
            if namespace.namespace_child(first_component) is None and not namespace.namespace_is_umbrella():
                continue
            subset[relative_key] = value
        return subset

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ApplicationConfiguration({len(self._values)} keys)"


def config_flatten_mapping(values: Mapping[str, Any], parent_key: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dotted keys.

    Args:
        values: Possibly nested mapping of configuration values.
        parent_key: Dotted prefix for the current nesting level.

    Returns:
        dict[str, Any]: Flat dotted-key mapping.

    Raises:
        ValueError: Raised when a key is blank or not a string.
    """

    flattened: dict[str, Any] = {}
    for key, value in values.items():
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"configuration keys must be non-blank strings: {key!r}")
        full_key = f"{parent_key}{CONFIG_PATH_SEPARATOR}{key.strip()}" if parent_key else key.strip()
        if isinstance(value, Mapping):
            flattened.update(config_flatten_mapping(value, parent_key=full_key))
        else:
            flattened[full_key] = value
    return flattened
