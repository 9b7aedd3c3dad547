"""Integration tests (real Redis via testcontainers)."""
