from ehrcloud.models.user.user import User

__all__ = ["User"]
