"""Scenario engine: cached scenario content, slug codec and related-scenario scoring."""
