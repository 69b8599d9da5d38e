"""flagcleaner core - Block rewriting, emptiness checks and the per-file pipeline."""
