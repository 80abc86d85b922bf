"""HTTP API: level catalog and script runs."""
