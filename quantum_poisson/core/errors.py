class EngineInputError(ValueError):
    """Input outside the engine's contract (negative lambda, trials <= 0, ...)."""
