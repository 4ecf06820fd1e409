from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, Optional
import openai
import os
from pathlib import Path
from dotenv import load_dotenv
import json
import traceback
from urllib.parse import quote

from parser.parser import DEFAULT_TITLE, UnsupportedDocumentError, extract_document_text
from llm.analyze import PyramidParseError, analyze_document, has_api_key
from pyramid.controller import InteractionController
from pyramid.models import EditorEvent, parse_pyramid_document
from pyramid.mutations import new_node_id
from slides.export import export_filename, export_slides_html, export_slides_pptx

load_dotenv()

# Configuration from environment
PORT = int(os.getenv("PORT", "8000"))

SAMPLE_DOCUMENT = Path(__file__).parent / "data" / "sample_document.json"
SERVICE_HINT = "Make sure the server is running with OPENAI_API_KEY set."
PPTX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One editing session per server process
    app.state.editor = InteractionController()
    yield


app = FastAPI(title="Pyramid Slides", lifespan=lifespan)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AnalyzeTextRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class PyramidPayload(BaseModel):
    title: str
    pyramid: Dict[str, Any]


def error_response(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 name (RFC 5987)."""
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "").replace("\\", "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def get_editor(request: Request) -> InteractionController:
    return request.app.state.editor


async def run_analysis(request: Request, title: str, text: str) -> JSONResponse:
    """
    Send a document to the model and, only on success, load the result into
    the editing session. Failures leave the session untouched.
    """
    if not text.strip():
        return error_response(400, "Document is empty")

    print(f"Analyzing document: {title} ({len(text)} chars)")
    try:
        result = await run_in_threadpool(analyze_document, title, text)
    except PyramidParseError as e:
        return error_response(500, e.message, raw=e.raw)
    except openai.AuthenticationError as e:
        print(f"Analysis error: {e}")
        return error_response(500, str(e), hint="Check that OPENAI_API_KEY is valid.")
    except Exception as e:
        print(f"Analysis error: {e}")
        traceback.print_exc()
        return error_response(500, str(e) or "Failed to analyze document", hint=SERVICE_HINT)

    get_editor(request).load(result)
    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "title": result.title,
            "pyramid": result.pyramid.model_dump(),
        },
    )


@app.post("/api/analyze")
async def analyze(request: Request):
    """
    Analyze an uploaded file (multipart field ``file``) or a pasted document
    (JSON ``{"title": ..., "content": ...}``) into a Minto pyramid.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if upload is None or isinstance(upload, str):
            content = form.get("content")
            if not content or not isinstance(content, str):
                return error_response(400, "No document provided")
            title = form.get("title")
            return await run_analysis(request, title if isinstance(title, str) and title else DEFAULT_TITLE, content)

        print(f"=== File Upload Request ===")
        print(f"Filename: {upload.filename}")
        print(f"Content-Type: {upload.content_type}")

        data = await upload.read()
        try:
            title, text = await run_in_threadpool(
                extract_document_text, upload.filename, upload.content_type, data
            )
        except UnsupportedDocumentError as e:
            print(f"ERROR: {e}")
            return error_response(400, str(e))
        except Exception as e:
            print(f"Error parsing document: {e}")
            traceback.print_exc()
            return error_response(500, f"Error parsing document: {e}")
        return await run_analysis(request, title, text)

    try:
        body = AnalyzeTextRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        return error_response(400, "No document provided")
    if not body.content:
        return error_response(400, "No document provided")

    return await run_analysis(request, body.title or DEFAULT_TITLE, body.content)


@app.post("/api/demo")
async def analyze_demo(request: Request):
    """Analyze the bundled sample strategy memo."""
    with open(SAMPLE_DOCUMENT, "r", encoding="utf-8") as f:
        sample = json.load(f)
    return await run_analysis(request, sample["title"], sample["content"])


@app.get("/api/health")
def health_check():
    ready = has_api_key()
    return {
        "status": "ok",
        "hasApiKey": ready,
        "message": "Ready" if ready else "Missing OPENAI_API_KEY environment variable",
    }


# ============================================================================
# EDITOR SESSION ENDPOINTS
# ============================================================================

@app.get("/api/pyramid")
async def get_pyramid(request: Request):
    editor = get_editor(request)
    if editor.root is None:
        return error_response(404, "No document loaded")
    return editor.snapshot()


@app.put("/api/pyramid")
async def put_pyramid(payload: PyramidPayload, request: Request):
    """Load an existing pyramid (e.g. a saved analysis) without calling the model."""
    try:
        document = parse_pyramid_document(payload.model_dump(), DEFAULT_TITLE, new_node_id)
    except (ValueError, ValidationError) as e:
        return error_response(400, f"Invalid pyramid: {e}")
    editor = get_editor(request)
    editor.load(document)
    return editor.snapshot()


@app.post("/api/pyramid/events")
async def post_event(event: EditorEvent, request: Request):
    """Apply one user gesture to the editing session."""
    editor = get_editor(request)
    if editor.root is None:
        return error_response(409, "No document loaded")
    try:
        changed = editor.dispatch(event)
    except ValueError as e:
        return error_response(400, str(e))
    return {
        "changed": changed,
        "notices": editor.take_notices(),
        "state": editor.snapshot(),
    }


@app.get("/api/pyramid/svg")
async def get_pyramid_svg(request: Request):
    editor = get_editor(request)
    if editor.root is None:
        return error_response(404, "No document loaded")
    return Response(content=editor.render_svg(), media_type="image/svg+xml")


@app.get("/api/slides")
async def get_slides(request: Request):
    editor = get_editor(request)
    if editor.root is None:
        return error_response(404, "No document loaded")
    return editor.slides_payload()


@app.get("/api/slides/export")
async def export_html(request: Request):
    editor = get_editor(request)
    if editor.root is None:
        return error_response(404, "No document loaded")
    html = export_slides_html(editor.document_title, editor.slides())
    filename = export_filename(editor.document_title, "html")
    return Response(
        content=html,
        media_type="text/html",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@app.get("/api/slides/export.pptx")
async def export_pptx(request: Request):
    editor = get_editor(request)
    if editor.root is None:
        return error_response(404, "No document loaded")
    data = await run_in_threadpool(export_slides_pptx, editor.slides())
    filename = export_filename(editor.document_title, "pptx")
    return Response(
        content=data,
        media_type=PPTX_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )


@app.get("/")
def read_root():
    return {"status": "Backend API is running", "note": "Serve the editor frontend separately."}


if __name__ == "__main__":
    import uvicorn
    print(f"\n🔺 Pyramid Slides")
    print(f"   Server running at http://localhost:{PORT}")
    print(f"\n   Make sure OPENAI_API_KEY is set in your environment\n")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
