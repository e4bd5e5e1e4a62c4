"""
Feature modules of the Plant Memory application.
"""
