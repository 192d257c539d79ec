# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Suite for the Arbiter mesh engine

Structure:
- mesh/: Tests for the mesh execution engine
- unit/: Unit tests for core utilities
"""
