"""Built-in plugins shipped with ratelock."""
