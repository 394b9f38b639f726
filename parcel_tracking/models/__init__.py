# Both models are imported here so the Guest <-> Parcel relationship resolves
# no matter which module is imported first (routes, Alembic, tests).
from parcel_tracking.models.guest import Guest
from parcel_tracking.models.parcel import Parcel

__all__ = ["Guest", "Parcel"]
