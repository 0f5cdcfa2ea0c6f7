from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class ClientDocument(Base):
    __tablename__ = "client_documents"

    id = Column(Text, primary_key=True)
    client_id = Column(Text, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    document_path = Column(Text, nullable=False, unique=True)
    document_type = Column(Text, nullable=False)
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    file_type = Column(Text, nullable=False, default="application/octet-stream")
    created_at = Column(Text, nullable=False)

    client = relationship("Client", back_populates="documents")


class UniversalDocument(Base):
    __tablename__ = "universal_documents"

    id = Column(Text, primary_key=True)
    document_path = Column(Text, nullable=False, unique=True)
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    file_type = Column(Text, nullable=False, default="application/octet-stream")
    created_at = Column(Text, nullable=False)
