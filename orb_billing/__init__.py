"""Orb Billing Client Package — typed async client for the Orb billing API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - Importing the package never configures logging

Design Decisions:
    - Empty __init__.py: explicit imports only (from orb_billing.client import OrbClient)
"""
