"""Mini Online Store: public product listing plus token-gated users over in-memory lists."""
