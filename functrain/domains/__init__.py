from .domain import Domain
from .bounded_domain import BoundedDomain
