from pydantic import BaseModel


class DeliverableUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    version: str | None = None


class DeliverableResponse(BaseModel):
    id: str
    client_id: str
    milestone_name: str
    title: str
    description: str | None
    document_path: str
    file_name: str
    file_size: int
    file_type: str
    version: str
    created_at: str
    updated_at: str
    url: str


class MilestoneGroup(BaseModel):
    milestone_name: str
    deliverables: list[DeliverableResponse]
