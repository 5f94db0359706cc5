"""Worktime System package.

This package is organized by feature modules (recurrence, schedules, deadlines,
reports, ...) with a thin Flask controller layer and service/repository layers
around a pure scheduling engine.
"""
