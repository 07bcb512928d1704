"""Output layer: Rich console, per-operation renderers, JSON formatting."""
