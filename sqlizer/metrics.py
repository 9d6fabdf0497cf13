"""Prometheus metrics shared by the CLI and the upload service."""
from prometheus_client import Counter, Histogram

documents_counter = Counter("sqlizer_documents_total", "Documents assembled from the input stream")
rows_counter = Counter("sqlizer_rows_total", "Rows handed to the statement sink")
batches_counter = Counter("sqlizer_batches_total", "Batch statements executed", ["table"])
errors_counter = Counter("sqlizer_load_errors_total", "Loads aborted by an error", ["kind"])
flush_duration = Histogram("sqlizer_flush_seconds", "Time spent executing one batch statement")
