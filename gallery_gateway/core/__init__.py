"""
Core gallery logic.

This module is framework-agnostic - it doesn't import FastAPI or any cloud
SDK. Storage is reached through the ObjectStore protocol, so the operations
can be tested against an in-memory store.
"""
