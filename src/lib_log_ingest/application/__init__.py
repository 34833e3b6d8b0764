"""Application layer: ports and the use cases driving log delivery."""
