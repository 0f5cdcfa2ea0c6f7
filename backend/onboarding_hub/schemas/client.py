from pydantic import BaseModel


class ClientCreate(BaseModel):
    name: str
    app_url: str | None = None


class ClientUpdate(BaseModel):
    name: str | None = None
    app_url: str | None = None
    logo_url: str | None = None


class ClientResponse(BaseModel):
    id: str
    name: str
    app_url: str | None
    logo_url: str | None
    created_at: str
    updated_at: str
