from typing import List

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import API_HOST, API_PORT, CONTACTS_FILE, CORS_ORIGINS, add_file_sinks, crud, schemas
from app.exceptions import ContactValidationError
from app.store import ContactStore

app = FastAPI(title="Contact Book API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


def get_store():
    """
    Contact store backed by the configured JSON file.

    :return: ContactStore instance
    """
    return ContactStore(CONTACTS_FILE)


def validation_response(errors):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid contact: " + "; ".join(errors), "errors": errors},
    )


@app.exception_handler(ContactValidationError)
async def contact_validation_handler(request: Request, exc: ContactValidationError):
    return validation_response(exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        errors.append(f"{field}: {error['msg']}")
    return validation_response(errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.get("/api/contacts", response_model=None, responses={200: {"model": List[schemas.ContactRead]}})
def read_contacts(store: ContactStore = Depends(get_store)):
    try:
        return crud.get_contacts(store)
    except Exception:
        logger.exception("Failed to read contacts")
        raise HTTPException(status_code=500, detail="Internal server error while reading contacts.")


@app.get("/api/contacts/search", response_model=None, responses={200: {"model": List[schemas.ContactRead]}})
def search_contacts(query: str = "", store: ContactStore = Depends(get_store)):
    try:
        return crud.search_contacts(store, query)
    except Exception:
        logger.exception(f"Failed to search contacts for {query!r}")
        raise HTTPException(status_code=500, detail="Internal server error while searching contacts.")


@app.post("/api/contacts", response_model=schemas.Message, status_code=status.HTTP_201_CREATED,
          responses={400: {"model": schemas.ValidationMessage}, 500: {"model": schemas.Message}})
def create_contact(contact: schemas.ContactCreate, store: ContactStore = Depends(get_store)):
    # The body only confirms success, clients reload the list to see the new id
    try:
        crud.create_contact(store, contact)
    except ContactValidationError:
        raise
    except Exception:
        logger.exception("Failed to add contact")
        raise HTTPException(status_code=500, detail="Internal server error while adding contact.")
    return {"message": "Contact added successfully"}


if __name__ == "__main__":
    import uvicorn

    add_file_sinks()

    logger.info(f"Contact book API running on http://{API_HOST}:{API_PORT}/api/contacts")
    uvicorn.run(app, host=API_HOST, port=API_PORT)
