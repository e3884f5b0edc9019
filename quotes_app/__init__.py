"""
Quotes App - Composable Price Quote Pipelines

Queries many shops for simulated remote price quotes and composes the
latency-bearing lookups into pipelines built from futures, bounded worker
pools and future combinators (map, chain, zip, subscribe, await_all).
"""

__version__ = "0.1.0"
__author__ = "Quotes App Team"
