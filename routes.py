# routes.py
from fastapi import FastAPI
from controller.claims_controller import claims_router
from controller.session_controller import session_router
from controller.validation_controller import validation_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(validation_router)
    app.include_router(session_router)
    app.include_router(claims_router)
