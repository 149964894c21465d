"""Runtime wiring: model factory and agent runtime."""
