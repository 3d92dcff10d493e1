"""Discord slash-command bot that stores per-guild key/value pairs."""
