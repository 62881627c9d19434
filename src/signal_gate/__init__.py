"""Signal admission and alert-throttling engine."""
