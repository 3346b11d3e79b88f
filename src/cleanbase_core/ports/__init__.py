from .identity import IIdentityProvider
from .mapper import IObjectMapper
from .repository import IRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "IIdentityProvider",
    "IObjectMapper",
    "IRepository",
    "UnitOfWork",
]
