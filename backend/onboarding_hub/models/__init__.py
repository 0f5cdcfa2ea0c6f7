from onboarding_hub.models.client import Client
from onboarding_hub.models.document import ClientDocument, UniversalDocument
from onboarding_hub.models.onboarding_step import OnboardingStep
from onboarding_hub.models.engagement import ClientEngagement
from onboarding_hub.models.risk import Risk
from onboarding_hub.models.deliverable import ClientDeliverable
from onboarding_hub.models.signature_request import SignatureRequest

__all__ = [
    "Client",
    "ClientDocument",
    "UniversalDocument",
    "OnboardingStep",
    "ClientEngagement",
    "Risk",
    "ClientDeliverable",
    "SignatureRequest",
]
