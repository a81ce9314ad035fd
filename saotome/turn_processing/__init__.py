"""Turn/move processing helpers.

This package centralizes validation + turn order so every move, whether it
comes from a seat at the table or from the simulator, flows through the same
pipeline and shows up consistently in server logs.
"""
