"""Core indicator and signal logic (pure math, no I/O).

This package contains pure business logic with no I/O dependencies
(no network, storage or UI access). It is consumed by the live chart
service in apex_app/ and can be called directly with in-memory bars.
"""
