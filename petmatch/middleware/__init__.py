# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains the error taxonomy and the Flask error handlers of the
Pet Match API.
"""
