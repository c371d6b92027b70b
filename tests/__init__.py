"""
Release builder test suite

- unit/: Tests for individual steps with build tools mocked out
- integration/: Full runs against fake build tools on disk
"""
