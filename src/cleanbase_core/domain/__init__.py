from .entity import Entity
from .specification import ISpecification

__all__ = ["Entity", "ISpecification"]
