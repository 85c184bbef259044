"""
Tests for the 2D grid flow solver.

Run tests with pytest:
    pytest eulergrid/tests/ -v

Or run individual test files:
    pytest eulergrid/tests/test_flux.py -v
"""
