from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class ClientEngagement(Base):
    __tablename__ = "client_engagements"

    id = Column(Text, primary_key=True)
    client_id = Column(Text, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    status = Column(Text, nullable=False, default="draft")
    email_sent_at = Column(Text)
    client_email = Column(Text)
    welcome_message = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    client = relationship("Client", back_populates="engagements")
