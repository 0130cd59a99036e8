from .timeutils import utc_now, as_utc

__all__ = ["utc_now", "as_utc"]
