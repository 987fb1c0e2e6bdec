"""Storage, codec and index implementations of the core ports."""
