"""
Cross-cutting infrastructure: settings, logging, the shared MongoDB
client, error types and bearer-token authentication.
"""
