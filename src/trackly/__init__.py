"""Trackly package.

Organized by feature modules (hours, statuses, work_items, reports, ...) with a
thin Flask controller layer on top of service/repository layers.
"""
