from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class ClientDeliverable(Base):
    __tablename__ = "client_deliverables"

    id = Column(Text, primary_key=True)
    client_id = Column(Text, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    milestone_name = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text)
    document_path = Column(Text, nullable=False, unique=True)
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    file_type = Column(Text, nullable=False, default="application/octet-stream")
    version = Column(Text, nullable=False, default="1.0")
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    client = relationship("Client", back_populates="deliverables")
