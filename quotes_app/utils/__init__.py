"""
Utility functions module.

Timing helpers used by the engine and the console walk-through to report
invocation, retrieval and batch durations in milliseconds.
"""
