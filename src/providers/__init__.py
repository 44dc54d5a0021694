"""Cloud provider bindings."""
