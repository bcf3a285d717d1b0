"""API integrations for applog."""
