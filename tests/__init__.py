"""
Test suite for sui-contribution-reconciler

Contains:
- tests/unit/      : Unit tests for individual modules
- tests/fakes.py   : Fake HTTP session and RPC object factories
"""
