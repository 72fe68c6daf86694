from prometheus_client import Counter, Histogram

# Low-cardinality labels: operation name and outcome (ok or error class), never keys
OPERATIONS = Counter(
    "storage_operations_total",
    "Total storage client operations",
    ["operation", "outcome"],
)

LATENCY = Histogram(
    "storage_operation_duration_seconds",
    "Storage client operation latency in seconds",
    ["operation"],
)
