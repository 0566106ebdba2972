"""Search core: local matching, orchestration and suggestions."""
