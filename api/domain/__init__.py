# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the officer subscription workflow.

This package contains pure business logic functions with no side effects.
"""
