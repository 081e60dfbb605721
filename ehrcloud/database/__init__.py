from ehrcloud.database.base_class import Base

__all__ = ["Base"]
