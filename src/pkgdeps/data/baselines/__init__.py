# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reviewed reference dependency lists, one JSON document per package type."""
