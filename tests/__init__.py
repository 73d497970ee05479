"""
Test suite for Study Digits.

This package contains all tests organized by component:
- test_algorithms/: Tests for neighbors, condensing, k-means and quality indices
- test_utils/: Tests for record files and image rendering
"""
