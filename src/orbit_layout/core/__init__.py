"""Layout pipeline stages for the orbit layout engine."""
