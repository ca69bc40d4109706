"""Regression tests for configuration schema parsing and option typing."""

import pytest

from scan_runner.config import (
    ApplicationConfiguration,
    ConfigNamespace,
    ConfigOption,
    ConfigurationParseError,
    config_element_parse,
    config_element_path,
)


def _build_schema() -> tuple[ConfigNamespace, dict[str, object]]:
    root = ConfigNamespace(None, "reindex", "Reindex job root")
    storage = ConfigNamespace(root, "storage", "Storage settings")
    index = ConfigNamespace(root, "index", "Index backends", umbrella=True)
    elements = {
        "batch_size": ConfigOption(root, "batch-size", "Rows per batch", int, default=100),
        "hostnames": ConfigOption(storage, "hostnames", "Storage hosts", list[str]),
        "read_only": ConfigOption(storage, "read-only", "Read-only mode", bool, default=False),
        "backend": ConfigOption(index, "backend", "Index backend name", str),
        "storage": storage,
        "index": index,
    }
    return root, elements


def test_config_element_parse_resolves_nested_option() -> None:
    """Resolve a dotted key to its option without umbrella elements.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the parsed element is unexpected.
    """

    root, elements = _build_schema()

    identifier = config_element_parse(root, "storage.hostnames")

    assert identifier.element is elements["hostnames"]
    assert identifier.umbrella_elements == ()
    assert identifier.identifier_is_option()


def test_config_element_parse_records_umbrella_elements() -> None:
    """Record user-defined names consumed by umbrella namespaces.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when umbrella handling is unexpected.
    """

    root, elements = _build_schema()

    identifier = config_element_parse(root, "index.search.backend")

    assert identifier.element is elements["backend"]
    assert identifier.umbrella_elements == ("search",)
    assert config_element_path(identifier.element, identifier.umbrella_elements) == "index.search.backend"


def test_config_element_parse_resolves_namespace_keys() -> None:
    root, elements = _build_schema()

    identifier = config_element_parse(root, "storage")

    assert identifier.element is elements["storage"]
    assert not identifier.identifier_is_option()


@pytest.mark.parametrize(
    ("key", "message"),
    [
        ("storage.unknown", "Unknown configuration element"),
        ("batch-size.extra", "is an option, not a namespace"),
        ("index.search.other.backend", "Unknown configuration element"),
        ("storage..hostnames", "Invalid configuration key"),
        ("", "Invalid configuration key"),
    ],
)
def test_config_element_parse_rejects_invalid_keys(key: str, message: str) -> None:
    """Reject keys that do not resolve against the schema.

    Args:
        key: Invalid configuration key.
        message: Expected error message fragment.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when an invalid key is accepted.
    """

    root, _ = _build_schema()

    with pytest.raises(ConfigurationParseError, match=message):
        config_element_parse(root, key)


def test_config_element_path_skips_root_namespace_name() -> None:
    root, elements = _build_schema()

    assert config_element_path(root) == ""
    assert config_element_path(elements["hostnames"]) == "storage.hostnames"
    assert config_element_path(elements["hostnames"], relative_to=elements["storage"]) == "hostnames"
    assert str(elements["read_only"]) == "storage.read-only"


def test_config_element_path_rejects_foreign_ancestor() -> None:
    root, elements = _build_schema()
    other_root = ConfigNamespace(None, "other", "Unrelated root")

    with pytest.raises(ValueError, match="is not declared under"):
        config_element_path(elements["hostnames"], relative_to=other_root)


def test_config_namespace_rejects_duplicate_child_names() -> None:
    root = ConfigNamespace(None, "root", "Root")
    ConfigOption(root, "limit", "Limit", int)

    with pytest.raises(ValueError, match="already declares"):
        ConfigOption(root, "limit", "Limit again", int)


def test_config_option_serializes_and_parses_flat_strings() -> None:
    """Round flat string values through the declared option types.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when typed conversion is unexpected.
    """

    _, elements = _build_schema()
    hostnames = elements["hostnames"]
    read_only = elements["read_only"]
    batch_size = elements["batch_size"]

    assert hostnames.option_serialize(["a.example", "b.example"]) == "a.example,b.example"
    assert hostnames.option_validate("a.example, b.example") == ["a.example", "b.example"]
    assert read_only.option_serialize(True) == "true"
    assert read_only.option_validate("false") is False
    assert batch_size.option_serialize(250) == "250"
    assert batch_size.option_validate("250") == 250
    assert batch_size.default == 100


def test_config_option_rejects_values_of_wrong_type() -> None:
    _, elements = _build_schema()

    with pytest.raises(ConfigurationParseError, match="storage.read-only") as error_info:
        elements["read_only"].option_validate("not-a-bool")

    assert error_info.value.config_key == "storage.read-only"


def test_config_application_configuration_flattens_nested_values() -> None:
    """Flatten nested mappings and read typed values with defaults.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when lookups are unexpected.
    """

    root, elements = _build_schema()
    app_config = ApplicationConfiguration({"storage": {"hostnames": "h1,h2"}, "index.search.backend": "lucene"})

    assert app_config.config_keys() == ("index.search.backend", "storage.hostnames")
    assert app_config.config_get(elements["hostnames"]) == ["h1", "h2"]
    assert app_config.config_get(elements["backend"], "search") == "lucene"
    assert app_config.config_get(elements["batch_size"]) == 100
    assert app_config.config_get_subset(elements["storage"]) == {"hostnames": "h1,h2"}
    assert app_config.config_get_subset(root) == {"storage.hostnames": "h1,h2", "index.search.backend": "lucene"}
