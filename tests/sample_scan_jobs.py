"""Scan jobs registered under custom names, imported only by the tests that run them."""

from scan_runner.jobs import ScanJob, scan_job_register

SAMPLE_LABEL_COUNT_JOB_NAME = "sample-label-count"


@scan_job_register(name=SAMPLE_LABEL_COUNT_JOB_NAME)
class SampleLabelCountJob(ScanJob):
    """Counts rows per `label` column value."""

    def job_config_namespace(self):
        return None

    def job_process(self, key, entries, metrics) -> None:
        metrics.metrics_increment_custom(f"label_{dict(entries)['label']}")
