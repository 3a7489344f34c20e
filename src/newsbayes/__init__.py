"""
Package initialization for the newsbayes module.

This __init__.py file makes the newsbayes directory a Python package,
enabling imports from the record model, estimator, classifier, data loading,
configuration and caching submodules.
"""
