from .policy import Capability, Route, can_perform, landing_route, resolve_route  # noqa: F401
