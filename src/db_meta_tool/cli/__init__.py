"""Command-line interface: build-db, export-scripts, update-db."""
