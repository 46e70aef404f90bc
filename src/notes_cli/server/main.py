from fastapi import FastAPI, Header, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from .models import (
    CreateNoteRequest, UpdateNoteRequest, NoteDTO, SummarizeRequest, SummarizeResponse, note_dto,
)
from ..db import DB
from ..config import NotesConfig
from ..functions import FUNCTION_ID, handle_request
from ..logging_utils import get_logger, setup_logging
from ..summarizer import summarize
from typing import List, Optional

def create_app(cfg: Optional[NotesConfig] = None, db: Optional[DB] = None) -> FastAPI:
    cfg = cfg or NotesConfig.from_env()
    setup_logging(cfg.log_level, cfg.log_path or None)
    log = get_logger("server")
    db = db or DB(cfg.db_path)

    app = FastAPI(title="Notes Service", version="0.1")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.db = db
    app.state.config = cfg

    @app.on_event("shutdown")
    def _shutdown():
        db.close()

    def _summary_for(content: str) -> Optional[str]:
        return summarize(content, cfg.default_sentences) or None

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/notes", response_model=List[NoteDTO])
    def list_notes(
        search: Optional[str] = None,
        limit: Optional[int] = None,
        x_user_id: str = Header("anonymous"),
    ):
        rows = db.list_notes(x_user_id, limit=limit or cfg.list_limit, search=search)
        return [note_dto(r) for r in rows]

    @app.post("/notes", response_model=NoteDTO, status_code=201)
    def create_note(req: CreateNoteRequest, x_user_id: str = Header("anonymous")):
        summary = req.summary
        if summary is None and cfg.auto_summarize:
            summary = _summary_for(req.content)
        r = db.create_note(x_user_id, req.title, req.content, summary)
        log.info("Created note %s for %s", r["id"], x_user_id)
        return note_dto(r)

    @app.get("/notes/{note_id}", response_model=NoteDTO)
    def get_note(note_id: str, x_user_id: str = Header("anonymous")):
        r = db.get_note(note_id, x_user_id)
        if not r:
            raise HTTPException(status_code=404, detail="Note not found")
        return note_dto(r)

    @app.patch("/notes/{note_id}", response_model=NoteDTO)
    def update_note(note_id: str, req: UpdateNoteRequest, x_user_id: str = Header("anonymous")):
        fields = {}
        if "summary" in req.model_fields_set:
            fields["summary"] = req.summary
        elif req.content is not None and cfg.auto_summarize:
            fields["summary"] = _summary_for(req.content)
        r = db.update_note(note_id, x_user_id, title=req.title, content=req.content, **fields)
        if not r:
            raise HTTPException(status_code=404, detail="Note not found")
        return note_dto(r)

    @app.delete("/notes/{note_id}", status_code=204)
    def delete_note(note_id: str, x_user_id: str = Header("anonymous")):
        if not db.delete_note(note_id, x_user_id):
            raise HTTPException(status_code=404, detail="Note not found")
        log.info("Deleted note %s", note_id)
        return Response(status_code=204)

    @app.api_route(f"/functions/{FUNCTION_ID}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def summarize_note_fn(request: Request):
        body = await request.body()
        payload, status = await run_in_threadpool(handle_request, db, request.method, body, cfg.default_sentences)
        return JSONResponse(payload, status_code=status)

    @app.post("/summarize", response_model=SummarizeResponse)
    def summarize_text(req: SummarizeRequest):
        return SummarizeResponse(summary=summarize(req.text, req.max_sentences))

    return app

def __getattr__(name: str):
    # `uvicorn notes_cli.server.main:app`; built on first access so importing
    # this module does not open the configured DB
    if name == "app":
        app = create_app()
        globals()["app"] = app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
