"""Runner bootstrap wiring for settings validation and dependency assembly."""

from scan_runner.config import EngineConfiguration, RunnerSettings, config_load_settings
from scan_runner.engines import LocalExecutionEngine
from scan_runner.jobs import ScanJobRunner


def bootstrap_create_scan_runner(settings: RunnerSettings | None = None) -> ScanJobRunner:
    """Assemble a scan job runner backed by the local execution engine.

    Args:
        settings: Optional pre-loaded settings; loaded from the environment when omitted.

    Returns:
        ScanJobRunner: Fully wired runner instance.

    Raises:
        SettingsLoadError: Raised when settings validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine = LocalExecutionEngine(
        executor_kind=resolved_settings.scan_local_executor,
        max_workers=resolved_settings.scan_local_max_workers,
        poll_interval_seconds=resolved_settings.scan_local_poll_interval_seconds,
        start_method=resolved_settings.scan_local_start_method,
    )
    return ScanJobRunner(engine=engine)


def bootstrap_create_engine_configuration(settings: RunnerSettings | None = None) -> EngineConfiguration:
    """Build a fresh engine configuration seeded with configured engine properties.

    Every submission needs its own instance; the runner mutates it in place.

    Returns:
        EngineConfiguration: New engine configuration.

    Raises:
        SettingsLoadError: Raised when settings validation fails.
    """

    resolved_settings = settings or config_load_settings()
    return EngineConfiguration(resolved_settings.scan_engine_properties)
