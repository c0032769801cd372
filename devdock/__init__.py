"""devdock - versioned, containerized development environments."""
