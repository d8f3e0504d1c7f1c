"""Router registry for val-search (search page, sync trigger, health, metrics)."""
