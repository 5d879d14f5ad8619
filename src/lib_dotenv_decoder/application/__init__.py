"""Application layer: coercion, field resolution, and the path assignment engine."""
