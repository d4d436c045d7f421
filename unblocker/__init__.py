"""
Unblocks Terraform Cloud workspaces stuck on cost-estimated runs.
"""

__version__ = "1.0.0"
