# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Mesh execution engine.

Agents expose the agents of the next level as tools and iterate between
deciding and invoking tools until they reach a terminal status.
"""
