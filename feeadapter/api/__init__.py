"""HTTP API for the fee router adapter."""
