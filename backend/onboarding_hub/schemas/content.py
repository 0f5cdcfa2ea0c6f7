from pydantic import BaseModel, Field, field_validator

from onboarding_hub.schemas.onboarding_step import OnboardingStepResponse


class GeneratedStep(BaseModel):
    title: str
    description: str

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class GeneratedContent(BaseModel):
    """Shape the model is asked to return for a welcome package."""

    welcome_message: str = Field(alias="welcomeMessage")
    next_steps: list[GeneratedStep] = Field(alias="nextSteps")

    model_config = {"populate_by_name": True}

    @field_validator("welcome_message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("welcomeMessage must not be empty")
        return value


class WelcomeContentRequest(BaseModel):
    document_id: str


class WelcomeContentResponse(BaseModel):
    welcome_message: str
    next_steps: list[OnboardingStepResponse]


class InsightRequest(BaseModel):
    user_query: str
