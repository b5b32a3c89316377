# =============================================================================
# Mapping Schema
# =============================================================================
# Declarative MongoDB schema provisioning for the parameter mapping system.
# See individual sub-packages for detailed documentation.
# =============================================================================

"""
Parameter mapping schema provisioning.

Sub-packages:
- models: Pydantic settings, desired-state declarations, domain documents
- provisioning: Idempotent reconciliation of a live database
"""

__version__ = "0.1.0"
