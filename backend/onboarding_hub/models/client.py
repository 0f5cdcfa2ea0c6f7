from sqlalchemy import Column, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    app_url = Column(Text)
    logo_url = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    documents = relationship("ClientDocument", back_populates="client", cascade="all, delete-orphan")
    onboarding_steps = relationship("OnboardingStep", back_populates="client", cascade="all, delete-orphan")
    engagements = relationship("ClientEngagement", back_populates="client", cascade="all, delete-orphan")
    risks = relationship("Risk", back_populates="client", cascade="all, delete-orphan")
    deliverables = relationship("ClientDeliverable", back_populates="client", cascade="all, delete-orphan")
    signature_requests = relationship("SignatureRequest", back_populates="client", cascade="all, delete-orphan")
