"""
BrickProvisioner - Databricks-on-Azure provisioning core.

Turns data product component descriptors into Azure Databricks workspaces
and keeps Unity Catalog grants on output ports aligned with the principals
allowed to read them.
"""

__version__ = "0.1.0"
