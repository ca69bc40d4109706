"""Typed configuration schema: namespaces, options and dotted-path parsing.

A namespace tree declares which keys are legal for one scan job type. Root
namespaces (declared without a parent) contribute no component to key paths,
so a job's root namespace defines keys such as `foo.bar` rather than
`<root>.foo.bar`. Umbrella namespaces accept one user-defined element name
between themselves and their children, for example `index.search.backend`
where `search` is chosen by the user.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, get_origin

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigurationParseError

CONFIG_PATH_SEPARATOR: Final[str] = "."
CONFIG_LIST_SEPARATOR: Final[str] = ","

_SEQUENCE_ORIGINS: Final[tuple[type, ...]] = (list, tuple, set, frozenset)


class ConfigElement:
    """Named node in a configuration schema tree.

    Attributes:
        namespace: Parent namespace, or None for a root namespace.
        name: Element name, unique within its parent.
        description: Human-readable element description.
    """

    def __init__(self, namespace: ConfigNamespace | None, name: str, description: str):
        if not name or not name.strip():
            raise ValueError("name must not be blank")
        if CONFIG_PATH_SEPARATOR in name:
            raise ValueError(f"name must not contain '{CONFIG_PATH_SEPARATOR}': {name}")

        self.namespace = namespace
        self.name = name.strip()
        self.description = description
        if namespace is not None:
            namespace._namespace_register_child(self)

    def element_is_root(self) -> bool:
        return self.namespace is None

    def element_is_namespace(self) -> bool:
        return False

    def element_is_option(self) -> bool:
        return False

    def element_root(self) -> ConfigElement:
        """Return the root namespace this element is declared under."""

        current: ConfigElement = self
        while current.namespace is not None:
            current = current.namespace
        return current

    def __str__(self) -> str:
        path = config_element_path(self)
        return path if path else self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ConfigNamespace(ConfigElement):
    """Configuration namespace grouping child namespaces and options.

    Attributes:
        umbrella: Whether the namespace accepts one user-defined element name.
    """

    def __init__(
        self,
        namespace: ConfigNamespace | None,
        name: str,
        description: str,
        umbrella: bool = False,
    ):
        self.umbrella = umbrella
        self._children: dict[str, ConfigElement] = {}
        super().__init__(namespace=namespace, name=name, description=description)

    def element_is_namespace(self) -> bool:
        return True

    def namespace_is_umbrella(self) -> bool:
        return self.umbrella

    def namespace_child(self, name: str) -> ConfigElement | None:
        """Return the declared child with the given name, if any."""

        return self._children.get(name)

    def namespace_children(self) -> tuple[ConfigElement, ...]:
        return tuple(self._children.values())

    def _namespace_register_child(self, element: ConfigElement) -> None:
        if element.name in self._children:
            raise ValueError(f"namespace [{self}] already declares an element named {element.name}")
        self._children[element.name] = element


class ConfigOption(ConfigElement):
    """Typed configuration option declared under a namespace.

    Values are validated and coerced with a pydantic `TypeAdapter` built from
    `option_type`, which is also how string values read back from a flat
    engine configuration regain their declared type.

    Attributes:
        option_type: Declared Python type of the option value.
        default: Value returned when the option is not set.
    """

    def __init__(
        self,
        namespace: ConfigNamespace,
        name: str,
        description: str,
        option_type: Any,
        default: Any = None,
    ):
        if namespace is None:
            raise ValueError("namespace must not be None")

        self.option_type = option_type
        self._type_adapter = TypeAdapter(option_type)
        super().__init__(namespace=namespace, name=name, description=description)
        self.default = default if default is None else self.option_validate(default)

    def element_is_option(self) -> bool:
        return True

    def option_is_sequence(self) -> bool:
        return get_origin(self.option_type) in _SEQUENCE_ORIGINS or self.option_type in _SEQUENCE_ORIGINS

    def option_validate(self, value: Any) -> Any:
        """Validate and coerce one value against the declared option type.

        Args:
            value: Candidate value, either typed or in flat string form.

        Returns:
            Any: Value coerced to the declared option type.

        Raises:
            ConfigurationParseError: Raised when the value does not fit the option type.
        """

        if isinstance(value, str) and self.option_is_sequence():
            value = [item.strip() for item in value.split(CONFIG_LIST_SEPARATOR) if item.strip()]

        try:
            return self._type_adapter.validate_python(value)
        except ValidationError as error:
            raise ConfigurationParseError(
                f"Invalid value for configuration option {self}: {value!r} ({error.error_count()} validation errors)",
                config_key=str(self),
            ) from error

    def option_serialize(self, value: Any) -> str:
        """Render one value in the flat string form used by engine configurations.

        Args:
            value: Value to serialize.

        Returns:
            str: Lowercase booleans, comma-joined sequences, `str()` otherwise.

        Raises:
            ConfigurationParseError: Raised when the value does not fit the option type.
        """

        validated_value = self.option_validate(value)
        if isinstance(validated_value, bool):
            return "true" if validated_value else "false"
        if isinstance(validated_value, (list, tuple, set, frozenset)):
            items = sorted(validated_value) if isinstance(validated_value, (set, frozenset)) else validated_value
            return CONFIG_LIST_SEPARATOR.join(str(item) for item in items)
        return str(validated_value)


@dataclass(frozen=True)
class PathIdentifier:
    """Result of parsing a dotted key against a namespace root.

    Attributes:
        element: Schema element the key resolves to.
        umbrella_elements: User-defined names consumed by umbrella namespaces.
    """

    element: ConfigElement
    umbrella_elements: tuple[str, ...] = ()

    def identifier_is_option(self) -> bool:
        return self.element.element_is_option()


def config_element_parse(root: ConfigNamespace, key: str) -> PathIdentifier:
    """Parse a dotted key relative to a namespace root into a schema element.

    Args:
        root: Namespace the key is relative to.
        key: Dotted configuration key.

    Returns:
        PathIdentifier: Resolved element and umbrella element names.

    Raises:
        ConfigurationParseError: Raised when the key is blank, walks through an
            option, or names an element unknown to a non-umbrella namespace.
    """

    components = key.split(CONFIG_PATH_SEPARATOR)
    if not key.strip() or any(not component.strip() for component in components):
        raise ConfigurationParseError(f"Invalid configuration key: {key!r}", config_key=key)

    last: ConfigElement = root
    umbrella_elements: list[str] = []
    consumed_umbrella = False
    for component in components:
        if not isinstance(last, ConfigNamespace):
            raise ConfigurationParseError(
                f"Invalid configuration path {key} [{component}]: {last} is an option, not a namespace",
                config_key=key,
            )
        parent = last
        child = parent.namespace_child(component)
        if child is not None:
            last = child
            consumed_umbrella = False
            continue
        if not parent.namespace_is_umbrella() or consumed_umbrella:
            raise ConfigurationParseError(
                f"Unknown configuration element in namespace [{parent}]: {component}",
                config_key=key,
            )
        umbrella_elements.append(component)
        consumed_umbrella = True

    return PathIdentifier(element=last, umbrella_elements=tuple(umbrella_elements))


def config_element_path(
    element: ConfigElement,
    umbrella_elements: tuple[str, ...] | list[str] = (),
    relative_to: ConfigNamespace | None = None,
) -> str:
    """Build the dotted path of a schema element.

    Args:
        element: Element to render.
        umbrella_elements: User-defined names placed after umbrella namespaces, top-down.
        relative_to: Optional ancestor namespace the path is relative to. When
            omitted the path is relative to the element's root namespace.

    Returns:
        str: Dotted path; empty for a root namespace without umbrella elements.

    Raises:
        ValueError: Raised when `relative_to` is not an ancestor of the element or
            more umbrella elements are supplied than umbrella namespaces exist.
    """

    chain: list[ConfigElement] = []
    current: ConfigElement | None = element
    while current is not None and current is not relative_to:
        chain.append(current)
        current = current.namespace

    if relative_to is not None:
        if current is None:
            raise ValueError(f"{element!r} is not declared under {relative_to!r}")
        base: ConfigElement = relative_to
    else:
        base = chain.pop()

    remaining = list(umbrella_elements)
    components: list[str] = []
    if isinstance(base, ConfigNamespace) and base.namespace_is_umbrella() and remaining:
        components.append(remaining.pop(0))
    for current_element in reversed(chain):
        components.append(current_element.name)
        if isinstance(current_element, ConfigNamespace) and current_element.namespace_is_umbrella() and remaining:
            components.append(remaining.pop(0))

    if remaining:
        raise ValueError(f"too many umbrella elements for {element!r}: {list(umbrella_elements)}")
    return CONFIG_PATH_SEPARATOR.join(components)
