"""Run storage-agnostic scan jobs as map-only jobs on a batch execution engine."""
