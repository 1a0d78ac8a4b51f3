"""Runtime services shared across the package."""
