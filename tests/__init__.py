"""
Tests package - Test suite for the GCP auth webhook.

Contains:
- unit/: Unit tests for individual components
"""
