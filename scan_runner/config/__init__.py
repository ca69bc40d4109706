"""Configuration package: settings, configuration schema and the engine namespace bridge."""

from .application import ApplicationConfiguration, config_flatten_mapping
from .bridge import config_copy_job_namespace, config_validate_pairing
from .engine import (
	SCAN_ENGINE_KEYS,
	SCAN_ENGINE_NAMESPACE,
	EngineConfiguration,
	PrefixedEngineConfiguration,
	ScanEngineKeys,
	config_scan_engine_keys,
)
from .errors import ConfigurationError, ConfigurationPairingError, ConfigurationParseError
from .namespace import (
	ConfigElement,
	ConfigNamespace,
	ConfigOption,
	PathIdentifier,
	config_element_parse,
	config_element_path,
)
from .settings import RunnerSettings, SettingsLoadError, config_load_settings

__all__ = [
	"ApplicationConfiguration",
	"ConfigElement",
	"ConfigNamespace",
	"ConfigOption",
	"ConfigurationError",
	"ConfigurationPairingError",
	"ConfigurationParseError",
	"EngineConfiguration",
	"PathIdentifier",
	"PrefixedEngineConfiguration",
	"RunnerSettings",
	"SCAN_ENGINE_KEYS",
	"SCAN_ENGINE_NAMESPACE",
	"ScanEngineKeys",
	"SettingsLoadError",
	"config_copy_job_namespace",
	"config_element_parse",
	"config_element_path",
	"config_flatten_mapping",
	"config_load_settings",
	"config_scan_engine_keys",
	"config_validate_pairing",
]
