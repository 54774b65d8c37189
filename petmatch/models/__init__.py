# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the Pet Match platform.

Import from the submodules (``models.entities``, ``models.filters``, ...);
the vocabulary helpers they validate with import ``models.enums`` directly.
"""
