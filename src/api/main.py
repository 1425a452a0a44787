"""
FastAPI backend: REST API over the contact use cases.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from phonebook.application import ContactService, NewContact
from phonebook.config import AppSettings, load_settings
from phonebook.domain import Contact
from phonebook.domain.phone import format_digits
from phonebook.errors import (
    ContactError,
    DeleteFailed,
    NotFound,
    StorageFailure,
)
from phonebook.infrastructure import RepositoryFactory, to_e164

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CreateContactBody(BaseModel):
    first_name: str
    last_name: str
    phone_number: str
    email: str | None = None
    address: str | None = None
    notes: str | None = None


class UpdateContactBody(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None


class ContactOut(BaseModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    phone_number: str
    display_phone: str
    phone_e164: str | None = None
    email: str | None = None
    address: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ContactListOut(BaseModel):
    contacts: list[ContactOut]
    total: int


def _to_out(contact: Contact, region: str | None) -> ContactOut:
    return ContactOut(
        id=contact.id,
        first_name=contact.first_name,
        last_name=contact.last_name,
        full_name=contact.full_name,
        phone_number=contact.phone_number,
        display_phone=format_digits(contact.phone_number),
        phone_e164=to_e164(contact.phone_number, default_region=region),
        email=contact.email,
        address=contact.address,
        notes=contact.notes,
        created_at=contact.created_at,
        updated_at=contact.updated_at,
    )


def _get_service(request: Request) -> ContactService:
    return request.app.state.service


def _region(request: Request) -> str | None:
    return request.app.state.settings.phone_default_region


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Build the app. Settings default to the environment, read at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or load_settings()
        logging.basicConfig(format=LOG_FORMAT, level=resolved.log_level)
        factory = RepositoryFactory(resolved.database)
        app.state.settings = resolved
        app.state.repositories = factory
        app.state.service = ContactService(factory.get())
        logger.info("Phonebook API ready (adapter: %s)", resolved.database.adapter)
        try:
            yield
        finally:
            factory.close()

    app = FastAPI(title="Phonebook API", lifespan=lifespan)

    @app.exception_handler(StorageFailure)
    async def storage_failure_handler(request: Request, exc: StorageFailure):
        logger.error(
            "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})

    # --- REST: health ---

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # --- REST: contacts ---

    @app.get("/api/contacts", response_model=ContactListOut)
    def list_contacts(request: Request, q: str | None = None):
        page = _get_service(request).list_contacts(q)
        region = _region(request)
        return ContactListOut(
            contacts=[_to_out(c, region) for c in page.records],
            total=page.total,
        )

    @app.post("/api/contacts", response_model=ContactOut, status_code=201)
    def create_contact(body: CreateContactBody, request: Request):
        try:
            contact = _get_service(request).create_contact(NewContact(**body.model_dump()))
        except StorageFailure:
            raise
        except ContactError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _to_out(contact, _region(request))

    @app.get("/api/contacts/{contact_id}", response_model=ContactOut)
    def get_contact(contact_id: str, request: Request):
        try:
            contact = _get_service(request).get_contact(contact_id)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return _to_out(contact, _region(request))

    @app.put("/api/contacts/{contact_id}", response_model=ContactOut)
    def update_contact(contact_id: str, body: UpdateContactBody, request: Request):
        try:
            contact = _get_service(request).update_contact(
                contact_id, body.model_dump(exclude_unset=True)
            )
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StorageFailure:
            raise
        except ContactError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _to_out(contact, _region(request))

    @app.delete("/api/contacts/{contact_id}", status_code=204)
    def delete_contact(contact_id: str, request: Request):
        try:
            _get_service(request).delete_contact(contact_id)
        except NotFound as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except DeleteFailed as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return Response(status_code=204)

    return app


app = create_app()
