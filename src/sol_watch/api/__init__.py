"""HTTP surface — health, metrics and watch-list management."""
