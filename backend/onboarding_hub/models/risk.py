from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class Risk(Base):
    __tablename__ = "risks"

    id = Column(Text, primary_key=True)
    client_id = Column(Text, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text)
    severity = Column(Text, nullable=False, default="medium")
    likelihood = Column(Text, nullable=False, default="medium")
    impact = Column(Text)
    mitigation_plan = Column(Text)
    status = Column(Text, nullable=False, default="open")
    assigned_to = Column(Text)
    due_date = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    client = relationship("Client", back_populates="risks")
