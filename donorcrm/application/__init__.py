"""Application layer: automation use cases (matcher, dispatcher, executor, sweep) and ports."""
