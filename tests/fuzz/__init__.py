"""Fuzz testing infrastructure for cafsynth.

This package contains:
- test_synthesis_oracle: State machine fuzzer comparing synthesis against a
  straightforward reference rendering
- test_synthesis_depth_exhaustion: Boundary testing for the array nesting limit

Python 3.13+.
"""
