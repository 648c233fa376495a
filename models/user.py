from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class User(Base):
     """
     User model - the landlord/operator account.
     Only a bcrypt hash of the password is stored. At most one user is active.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     username = Column(String(100), unique=True, nullable=False, index=True)
     password_hash = Column(String(255), nullable=False)
     email = Column(String(255), nullable=True)
     full_name = Column(String(200), nullable=False, default="")
     phone_number = Column(String(50), nullable=True)
     is_active = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     last_login = Column(DateTime, nullable=True)

     # Relationships
     shops = relationship("Shop", back_populates="user", cascade="all")
     tenants = relationship("Tenant", back_populates="user", cascade="all")
     activities = relationship("ActivityLog", back_populates="user", cascade="all")

     def __repr__(self):
          return f"<User(id={self.id}, username='{self.username}', active={self.is_active})>"
