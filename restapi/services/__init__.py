"""Integrations with the user store and the session store."""
