from manual_api.models.models import Base, UserManual

__all__ = [
    "Base",
    "UserManual",
]
