"""Pipeline steps and their production adapters."""
