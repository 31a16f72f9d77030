"""
Paper Routes

JSON API driving the four wizard steps, plus the printable preview page.
The wizard session id lives in the Flask session cookie; the session itself
is kept in the ``SessionStore`` registered on the application.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import (
    Blueprint,
    current_app,
    jsonify,
    render_template,
    request,
    send_file,
    session,
)

from src.exceptions import ExportError, NotFoundError, ValidationError
from src.i18n.labels import Locale, classes_for, labels_for, subjects_for
from src.models.api_responses import APIMetadata, APIResponse, ErrorDetail
from src.models.document_models import ImageUpload
from src.services.paper_session import PaperSession, SessionStore
from src.services.pagination_service import count_pages, display_text
from utils.logger import logger

paper_bp = Blueprint("paper", __name__)

SESSION_KEY = "paper_session_id"


def _store() -> SessionStore:
    return current_app.extensions["paper_sessions"]


def _current_session() -> PaperSession:
    paper_session = _store().get(session.get(SESSION_KEY))
    if paper_session is None:
        raise NotFoundError(
            "No paper session, start one with POST /api/paper/session",
            resource_type="session",
        )
    return paper_session


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _success(data: Any = None, message: Optional[str] = None, status: int = 200, warnings: Optional[List[str]] = None):
    response = APIResponse.success(data=data, message=message, metadata=APIMetadata(warnings=warnings or []))
    return jsonify(response.to_dict()), status


# Session


@paper_bp.route("/api/paper/session", methods=["POST"])
def start_session():
    """Start a new wizard run, discarding the previous one."""
    store = _store()
    store.discard(session.get(SESSION_KEY))
    paper_session = store.create()
    session[SESSION_KEY] = paper_session.session_id
    return _success(paper_session.to_dict(), "Paper session started", status=201)


@paper_bp.route("/api/paper/session", methods=["GET"])
def get_session():
    return _success(_current_session().to_dict())


# Step 1: details


@paper_bp.route("/api/paper/details", methods=["POST"])
def submit_details():
    paper_session = _current_session()
    paper_session.submit_details(_json_body())
    return _success(paper_session.to_dict())


# Step 2: images and extraction


@paper_bp.route("/api/paper/images", methods=["POST"])
def upload_images():
    paper_session = _current_session()
    settings = current_app.config["PAPER_SETTINGS"]
    ocr_service = current_app.extensions["ocr_service"]
    files = request.files.getlist("images")

    if not files:
        message = paper_session.labels.image_required
        raise ValidationError(message, field="images", user_message=message)

    uploads = []
    for file in files:
        filename = file.filename or "image"
        if Path(filename).suffix.lower() not in settings.supported_formats:
            raise ValidationError(
                f"Unsupported file type: {filename}",
                field="images",
                details={"allowed": settings.supported_formats},
            )
        content = file.read()
        mime_type = ocr_service.validate_image(content)
        uploads.append(ImageUpload(filename=filename, content=content, mime_type=mime_type))

    added, ignored = paper_session.add_images(uploads)
    warnings = []
    if ignored:
        warnings.append(f"{ignored} image(s) ignored, maximum is {paper_session.max_images}")

    return _success(
        {
            "added": [image.to_dict() for image in added],
            "images": [image.to_dict() for image in paper_session.images],
        },
        status=201,
        warnings=warnings,
    )


@paper_bp.route("/api/paper/images/<int:index>", methods=["DELETE"])
def remove_image(index: int):
    paper_session = _current_session()
    removed = paper_session.remove_image(index)
    return _success(
        {
            "removed": removed.to_dict(),
            "images": [image.to_dict() for image in paper_session.images],
        }
    )


@paper_bp.route("/api/paper/extract", methods=["POST"])
def extract_text():
    """Run OCR for every image that has no text yet."""
    paper_session = _current_session()
    ocr_service = current_app.extensions["ocr_service"]

    def on_progress(completed: int, total: int, index: int, success: bool) -> None:
        logger.info(f"Extraction progress {completed}/{total} (image {index}: {'ok' if success else 'failed'})")

    result = paper_session.run_extraction(ocr_service, on_progress=on_progress)
    data = paper_session.to_dict()

    if result.all_succeeded:
        return _success(data, "Text extracted")

    labels = paper_session.labels
    errors = [
        ErrorDetail(
            code=error.error_code,
            message=labels.extraction_error,
            field=f"images[{index}]",
            details={"image_index": index, "reason": error.message},
        )
        for index, error in sorted(result.errors.items())
    ]
    response = APIResponse.partial(data=data, message=labels.extraction_error, errors=errors)
    status = 207 if result.texts else 502
    return jsonify(response.to_dict()), status


# Step 3: raw text, metadata, default format


@paper_bp.route("/api/paper/texts", methods=["PUT"])
def submit_texts():
    paper_session = _current_session()
    body = _json_body()
    texts = body.get("texts")
    if not isinstance(texts, list):
        raise ValidationError("texts must be a list of strings", field="texts")

    paper_session.submit_texts(texts, metadata=body.get("metadata"), text_format=body.get("format"))
    return _success(paper_session.to_dict())


@paper_bp.route("/api/paper/back", methods=["POST"])
def go_back():
    paper_session = _current_session()
    paper_session.go_back()
    return _success(paper_session.to_dict())


# Step 4: blocks and editing


@paper_bp.route("/api/paper/blocks", methods=["GET"])
def get_blocks():
    return _success(_current_session().controller.to_dict())


@paper_bp.route("/api/paper/blocks/<int:block_index>/lines/<int:line_index>", methods=["PATCH"])
def update_line(block_index: int, line_index: int):
    """Edit the text and/or the format of one line."""
    controller = _current_session().controller
    body = _json_body()
    if "content" not in body and "format" not in body:
        raise ValidationError("Provide content and/or format")

    format_changes = body.get("format")
    if format_changes is not None and not isinstance(format_changes, dict):
        raise ValidationError("format must be an object", field="format")

    if "content" in body:
        controller.edit_line_text(block_index, line_index, body["content"])
    applied = True
    if format_changes:
        applied = controller.set_line_format(block_index, line_index, format_changes)

    return _success({"applied": applied, **controller.to_dict()})


@paper_bp.route("/api/paper/blocks/<int:block_index>/lines/<int:line_index>", methods=["DELETE"])
def delete_line(block_index: int, line_index: int):
    controller = _current_session().controller
    deleted = controller.delete_line(block_index, line_index)
    return _success({"deleted": deleted, **controller.to_dict()})


@paper_bp.route("/api/paper/edit/enter", methods=["POST"])
def enter_editing():
    controller = _current_session().controller
    controller.enter_editing()
    return _success(controller.to_dict())


@paper_bp.route("/api/paper/edit/save", methods=["POST"])
def save_edits():
    controller = _current_session().controller
    controller.save()
    return _success(controller.to_dict(), "Changes saved")


@paper_bp.route("/api/paper/edit/cancel", methods=["POST"])
def cancel_edits():
    controller = _current_session().controller
    controller.cancel()
    return _success(controller.to_dict(), "Changes discarded")


@paper_bp.route("/api/paper/edit/content/<int:block_index>", methods=["PUT"])
def update_content(block_index: int):
    controller = _current_session().controller
    body = _json_body()
    if "content" not in body:
        raise ValidationError("content is required", field="content")
    controller.update_content(block_index, body["content"])
    return _success({"block_index": block_index, "content": controller.contents[block_index]})


@paper_bp.route("/api/paper/edit/select/<int:block_index>", methods=["POST"])
def select_block(block_index: int):
    controller = _current_session().controller
    controller.select_block(block_index)
    return _success({"selected_block": controller.selected_block})


# Output


@paper_bp.route("/api/paper/render", methods=["GET"])
def render_commands():
    paper_session = _current_session()
    commands = current_app.extensions["pagination"].render(
        paper_session.controller.blocks, paper_session.metadata
    )
    return _success(
        {
            "pages": count_pages(commands),
            "commands": [command.to_dict() for command in commands],
        }
    )


@paper_bp.route("/api/paper/export/pdf", methods=["GET"])
def export_pdf():
    paper_session = _current_session()
    controller = paper_session.controller
    try:
        pdf_path = current_app.extensions["pdf_export"].export(controller.blocks, paper_session.metadata)
    except ExportError as e:
        e.user_message = paper_session.labels.export_error
        raise

    return send_file(
        str(pdf_path.resolve()),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=pdf_path.name,
    )


@paper_bp.route("/api/paper/labels", methods=["GET"])
def get_labels():
    """Labels and option lists for a language (session language by default)."""
    language = request.args.get("language")
    if language:
        locale = Locale.parse(language)
    else:
        paper_session = _store().get(session.get(SESSION_KEY))
        locale = paper_session.metadata.locale if paper_session else Locale.ENGLISH

    return _success(
        {
            "language": locale.value,
            "labels": labels_for(locale).to_dict(),
            "classes": classes_for(locale),
            "subjects": subjects_for(locale),
        }
    )


@paper_bp.route("/paper/preview", methods=["GET"])
def preview_page():
    """Printable preview rendered straight from the blocks."""
    paper_session = _current_session()
    blocks = paper_session.controller.blocks
    lines = [
        [
            {"text": display_text(block, index), "format": line.format}
            for index, line in enumerate(block.lines)
        ]
        for block in blocks
    ]
    return render_template(
        "preview.html",
        metadata=paper_session.metadata,
        labels=paper_session.labels,
        blocks=lines,
        attribution=current_app.extensions["pagination"].attribution,
    )
