"""JSON schema contracts shipped with the package."""
