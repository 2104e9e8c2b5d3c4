"""ORM models."""

from poultry_kernel.models.state_document import StateDocument

__all__ = ["StateDocument"]
