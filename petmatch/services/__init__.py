# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - collaborator clients, feed loading and HAL formatting.

Submodules are imported directly (``petmatch.services.feed``) so that the
error taxonomy in ``petmatch.middleware`` can use the HAL formatter without
an import cycle.
"""
