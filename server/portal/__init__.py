"""Police unit portal: list reconciliation, statistics and report exports."""
