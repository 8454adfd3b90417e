"""
Integration tests for cross-component interactions.

Tests how multiple components work together without mocking
their interactions. These tests validate that the integration
points between different modules work correctly.
"""