# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, EmailStr, StrictBool

from todoapp.auth.accounts import AccountStore
from todoapp.auth.passwords import CredentialHasher
from todoapp.auth.sessions import LoginResult, SessionManager
from todoapp.auth.tokens import TokenCodec
from todoapp.config import Settings, load_settings
from todoapp.errors import Conflict, InvalidCredentials, NotFound, Unauthenticated, ValidationError
from todoapp.infra.document_store import DocumentStore
from todoapp.permissions import CurrentAccount, require_account
from todoapp.services.account_service import AccountService
from todoapp.services.todo_service import TodoService


def build_state(app: FastAPI, settings: Settings) -> None:
    """Wire stores and auth components onto ``app.state``."""
    hasher = CredentialHasher()
    codec = TokenCodec(settings.secret_key, salt=settings.token_salt)
    accounts = AccountStore(DocumentStore("accounts", settings.data_dir / "accounts.yml"))
    sessions = SessionManager(accounts, hasher, codec)

    app.state.settings = settings
    app.state.accounts = accounts
    app.state.sessions = sessions
    app.state.account_service = AccountService(accounts, hasher, sessions)
    app.state.todos = TodoService(DocumentStore("todos", settings.data_dir / "todos.yml"))


SETTINGS = load_settings()
SETTINGS.data_dir.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="todoapp")
build_state(app, SETTINGS)


# ------------------ Error mapping ------------------


@app.exception_handler(InvalidCredentials)
async def _invalid_credentials(request: Request, exc: InvalidCredentials):
    return Response(status_code=400)


@app.exception_handler(Unauthenticated)
async def _unauthenticated(request: Request, exc: Unauthenticated):
    return Response(status_code=401)


@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound):
    return Response(status_code=404)


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.errors})


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Conflict)
async def _conflict(request: Request, exc: Conflict):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ------------------ Request bodies ------------------


class RegisterBody(BaseModel):
    email: EmailStr
    password: str


class LoginBody(BaseModel):
    email: str
    password: str


class TodoCreateBody(BaseModel):
    text: str


class TodoPatchBody(BaseModel):
    text: Optional[str] = None
    completed: Optional[StrictBool] = None


def _session_response(request: Request, result: LoginResult) -> JSONResponse:
    resp = JSONResponse(content=result.account.public())
    resp.headers[request.app.state.settings.auth_header] = result.token
    return resp


# ------------------ Routes ------------------


@app.post("/users")
def register(request: Request, body: RegisterBody):
    result = request.app.state.account_service.register(str(body.email), body.password)
    return _session_response(request, result)


@app.post("/users/login")
def login(request: Request, body: LoginBody):
    result = request.app.state.sessions.login(body.email, body.password)
    return _session_response(request, result)


@app.get("/users/me")
def me(current: CurrentAccount = Depends(require_account)):
    return current.account.public()


@app.delete("/users/me/token")
def logout(request: Request, current: CurrentAccount = Depends(require_account)):
    request.app.state.sessions.logout(current.id, current.token)
    return Response(status_code=200)


@app.post("/todos")
def create_todo(request: Request, body: TodoCreateBody):
    return request.app.state.todos.create(body.text)


@app.get("/todos")
def list_todos(request: Request):
    return {"todos": request.app.state.todos.list_all()}


@app.get("/todos/{todo_id}")
def get_todo(request: Request, todo_id: str):
    return {"todo": request.app.state.todos.get(todo_id)}


@app.delete("/todos/{todo_id}")
def delete_todo(request: Request, todo_id: str):
    return {"todo": request.app.state.todos.delete(todo_id)}


@app.patch("/todos/{todo_id}")
def update_todo(request: Request, todo_id: str, body: Optional[TodoPatchBody] = Body(default=None)):
    patch = body or TodoPatchBody()
    return request.app.state.todos.update(todo_id, text=patch.text, completed=patch.completed)
