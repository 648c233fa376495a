from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class ActivityLog(Base):
     """Append-only audit trail of human-readable events."""
     __tablename__ = "activity_log"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
     message = Column(String(500), nullable=False)
     timestamp = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     user = relationship("User", back_populates="activities")

     def __repr__(self):
          return f"<ActivityLog(id={self.id}, message='{self.message}')>"
