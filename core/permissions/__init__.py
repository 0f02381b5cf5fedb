"""
Role and permission checks for the ERP screens and endpoints.

Permissions are a closed set of (resource, action) pairs; see
``core.permissions.core_config`` for the catalogue and the default map.
"""
