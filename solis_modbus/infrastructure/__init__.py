"""Infrastructure layer: codec, state machines, transports and decorators."""
