# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for ADCL backend services.

Tests individual service classes in isolation.
Target: >80% code coverage per service.
"""
