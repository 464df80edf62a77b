"""Cross-cutting concerns: errors and observability."""
