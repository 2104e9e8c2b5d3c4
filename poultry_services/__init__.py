"""
Poultry Services - stateful orchestration over engines and kernel.

FarmService is the entry point applications use; it owns the
read, compute and persist cycle for the state document.
"""

from poultry_services.farm_service import FarmService

__all__ = ["FarmService"]
