# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pet Match donor search and matching core.

Faceted search over the public blood-donation request feed plus the donor
eligibility and blood-type compatibility rules used by the donor-selection flow.
"""

__version__ = "1.0.0"
