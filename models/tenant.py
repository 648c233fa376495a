from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Tenant(Base):
     """
     Tenant model - a person or business renting shops over time.
     Tenants are deactivated, never deleted, so past agreements keep their party.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

     # Personal info
     full_name = Column(String(200), nullable=False)
     phone_number = Column(String(50), nullable=False)
     email = Column(String(255), nullable=True)
     address = Column(String(500), nullable=False, default="")

     # ID verification
     id_type = Column(String(100), nullable=True)  # Passport, Driver's License, etc.
     id_number = Column(String(100), nullable=True)

     # Emergency contact
     emergency_contact = Column(String(200), nullable=True)
     emergency_phone = Column(String(50), nullable=True)

     # Business
     company_name = Column(String(255), nullable=True)
     business_type = Column(String(100), nullable=True)

     notes = Column(Text, nullable=True)
     is_active = Column(Boolean, default=True, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     user = relationship("User", back_populates="tenants")
     agreements = relationship("LeaseAgreement", back_populates="tenant", cascade="all")

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.full_name}')>"
