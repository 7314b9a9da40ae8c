"""
Core domain models, amount arithmetic, contracts, errors and configuration.

This module contains the foundational building blocks that are independent
of the RPC transport.
"""
