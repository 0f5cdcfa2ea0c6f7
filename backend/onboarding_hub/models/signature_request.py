from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from onboarding_hub.database import Base


class SignatureRequest(Base):
    __tablename__ = "signature_requests"

    id = Column(Text, primary_key=True)
    client_id = Column(Text, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    sow_document_id = Column(Text, ForeignKey("client_documents.id", ondelete="SET NULL"))
    nda_document_id = Column(Text, ForeignKey("universal_documents.id", ondelete="SET NULL"))
    recipient_name = Column(Text, nullable=False)
    recipient_email = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="draft")
    external_request_id = Column(Text)
    signing_url = Column(Text, unique=True)
    signed_document_url = Column(Text)
    signer_typed_signature = Column(Text)
    signer_entity_name = Column(Text)
    signer_title = Column(Text)
    signed_at = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    client = relationship("Client", back_populates="signature_requests")
    sow_document = relationship("ClientDocument")
    nda_document = relationship("UniversalDocument")
