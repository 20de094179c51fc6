"""Calendar data model, merge rule, aggregation and scheduled synchronization."""
