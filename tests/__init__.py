"""Test suite for calcgrapher.

Test Structure:
- unit/: Unit tests for individual components
  - config/: Config models and YAML loading
  - curves/: Curve model, manipulation modes, derived curves and presets
  - utils/: Utility function tests
- conftest.py: Shared fixtures and test configuration
"""
