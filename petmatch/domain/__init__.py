# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the Pet Match platform.

This package contains pure business logic functions with no side effects:
filter state transitions, URL encoding, predicate compilation, donor
eligibility and blood type compatibility. The debounce pipeline is the only
stateful piece and takes its clock as a parameter.
"""
