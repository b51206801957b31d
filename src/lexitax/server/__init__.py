"""
Local mock of the LexiTax backend.

Serves the REST contract from in-memory state with canned answers so the
client can run end to end without the real backend.
"""
