"""Per-run working area and artifact writers."""
