from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class OnboardingStep(Base):
    __tablename__ = "onboarding_steps"

    id = Column(Text, primary_key=True)
    client_id = Column(Text, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text)
    status = Column(Text, nullable=False, default="not_started")
    start_date = Column(Text)
    end_date = Column(Text)
    order_index = Column(Integer, nullable=False, default=0)
    client_visible = Column(Boolean, nullable=False, default=True)
    internal_notes = Column(Text)
    assigned_to = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    client = relationship("Client", back_populates="onboarding_steps")
