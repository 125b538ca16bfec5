# server/models/user.py

from sqlalchemy import Column, String
from . import Base, new_object_id


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Stores username, email and the bcrypt hash of the password; never the raw password.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_object_id)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    def to_document(self) -> dict:
        return {
            "_id": self.id,
            "username": self.username,
            "email": self.email,
            "hashed_password": self.hashed_password,
        }
