"""I/O layer: catalog access, database connections and script files."""
