"""
Package initialization for the scripts module.

This __init__.py file makes the scripts directory a Python package,
enabling absolute imports from the scripts submodules and providing
a namespace for training, evaluation and classification scripts.
"""
