"""Core gameplay primitives (event log and state rendering).

Kept free of storage concerns so it can be reused by the engine, scripts, and tests.
"""
