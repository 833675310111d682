"""Domain definitions: resource types, their input schemas and query filters."""
