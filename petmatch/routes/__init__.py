# SPDX-License-Identifier: Apache-2.0

"""
HTTP routes of the Pet Match API.
"""
