"""Internal helpers shared across kumi modules."""
