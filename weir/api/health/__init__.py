"""Liveness and readiness probes.

Usage
-----
Import health resources for route registration::

    from weir.api.health.resources import HealthResource, ReadyResource
"""
