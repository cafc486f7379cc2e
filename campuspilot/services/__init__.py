"""Domain services: identity verification, numeric coercion, score aggregation."""
