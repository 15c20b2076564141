"""
Infrastructure layer - external service integrations.

- storage: Object stores (Google Cloud Storage, S3-compatible, in-memory)

These wrappers translate between SDK calls and the ObjectStore protocol.
"""
