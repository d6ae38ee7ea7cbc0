"""Progress tracking domain: authorization and hierarchical progress engines."""
