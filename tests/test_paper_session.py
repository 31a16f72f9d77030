"""Tests for the wizard session state machine."""

import pytest

from src.exceptions import ExtractionError, NotFoundError, ValidationError, WizardStepError
from src.i18n.labels import Locale
from src.models.document_models import ImageUpload
from src.services.ocr_service import BatchExtractionResult
from src.services.paper_session import PaperSession, SessionStore, WizardStep

DETAILS = {"class_name": "Class 8", "subject": "Science", "language": "english"}


def upload(n):
    return ImageUpload(filename=f"page{n}.png", content=f"image-{n}".encode(), mime_type="image/png")


@pytest.fixture
def session():
    return PaperSession(max_images=3)


@pytest.fixture
def upload_session(session):
    session.submit_details(DETAILS)
    return session


@pytest.fixture
def edit_session(upload_session, mock_ocr_service):
    upload_session.add_images([upload(0), upload(1)])
    upload_session.run_extraction(mock_ocr_service)
    return upload_session


@pytest.fixture
def preview_session(edit_session):
    edit_session.submit_texts(edit_session.raw_texts, metadata={"exam_time": "3 hours", "total_marks": "80"})
    return edit_session


class TestDetailsStep:
    def test_defaults(self, session):
        assert session.step is WizardStep.DETAILS
        assert session.metadata.school_name == "SHASHWAT PUBLIC SCHOOL"
        assert session.metadata.locale is Locale.ENGLISH
        assert session.default_format.font_size == 11

    def test_submit_details_moves_to_upload(self, session):
        session.submit_details({**DETAILS, "language": "hindi"})

        assert session.step is WizardStep.UPLOAD
        assert session.metadata.locale is Locale.HINDI
        assert session.labels.page_text == "पृष्ठ"

    def test_missing_required_details(self, session):
        with pytest.raises(ValidationError) as exc_info:
            session.submit_details({"class_name": "Class 8", "school_name": ""})

        errors = exc_info.value.details["validation_errors"]
        assert [error["field"] for error in errors] == ["school_name", "subject"]
        assert session.step is WizardStep.DETAILS
        assert session.metadata.class_name == ""

    def test_cannot_go_back_from_first_step(self, session):
        with pytest.raises(WizardStepError):
            session.go_back()


class TestUploadStep:
    def test_extra_images_are_ignored(self, upload_session):
        added, ignored = upload_session.add_images([upload(n) for n in range(5)])

        assert len(added) == 3
        assert ignored == 2
        assert [image.filename for image in upload_session.images] == ["page0.png", "page1.png", "page2.png"]

    def test_add_images_requires_upload_step(self, session):
        with pytest.raises(WizardStepError):
            session.add_images([upload(0)])

    def test_extraction_requires_images(self, upload_session, mock_ocr_service):
        with pytest.raises(ValidationError) as exc_info:
            upload_session.run_extraction(mock_ocr_service)
        assert exc_info.value.message == "Image upload is required"
        mock_ocr_service.extract_batch.assert_not_called()

    def test_successful_extraction_moves_to_edit(self, edit_session, mock_ocr_service):
        assert edit_session.step is WizardStep.EDIT
        assert edit_session.raw_texts == [
            "Question from image 1\ni) first part",
            "Question from image 2\ni) first part",
        ]
        _, locale = mock_ocr_service.extract_batch.call_args[0]
        assert locale is Locale.ENGLISH

    def test_partial_failure_stays_on_upload_and_retries_pending(self, upload_session, mock_ocr_service):
        upload_session.add_images([upload(0), upload(1)])

        failed = BatchExtractionResult(texts={0: "first text"}, errors={1: ExtractionError("quota exceeded")})
        mock_ocr_service.extract_batch.side_effect = None
        mock_ocr_service.extract_batch.return_value = failed

        upload_session.run_extraction(mock_ocr_service)
        assert upload_session.step is WizardStep.UPLOAD
        assert upload_session.extracted == {0: "first text"}
        assert upload_session.extraction_errors == {1: "quota exceeded"}

        mock_ocr_service.extract_batch.return_value = BatchExtractionResult(texts={1: "second text"})
        upload_session.run_extraction(mock_ocr_service)

        pending = mock_ocr_service.extract_batch.call_args[0][0]
        assert list(pending) == [1]
        assert upload_session.step is WizardStep.EDIT
        assert upload_session.raw_texts == ["first text", "second text"]
        assert upload_session.extraction_errors == {}

    def test_remove_image_shifts_results(self, upload_session):
        upload_session.add_images([upload(0), upload(1), upload(2)])
        upload_session.extracted = {0: "zero", 2: "two"}
        upload_session.extraction_errors = {1: "failed"}

        removed = upload_session.remove_image(1)

        assert removed.filename == "page1.png"
        assert upload_session.extracted == {0: "zero", 1: "two"}
        assert upload_session.extraction_errors == {}

    def test_remove_missing_image(self, upload_session):
        with pytest.raises(NotFoundError):
            upload_session.remove_image(0)

    def test_back_to_details_discards_results(self, upload_session):
        upload_session.add_images([upload(0)])
        upload_session.extracted = {0: "text"}

        assert upload_session.go_back() is WizardStep.DETAILS
        assert upload_session.extracted == {}
        assert len(upload_session.images) == 1


class TestEditStep:
    def test_submit_texts_builds_blocks(self, edit_session):
        controller = edit_session.submit_texts(
            ["Edited question\na) part", "Second"],
            metadata={"exam_term": "Annual", "has_student_fields": True},
            text_format={"font_size": 13, "bold": True},
        )

        assert edit_session.step is WizardStep.PREVIEW
        assert edit_session.metadata.exam_term == "Annual"
        assert edit_session.metadata.has_student_fields is True
        assert edit_session.default_format.font_size == 13
        assert [len(block.lines) for block in controller.blocks] == [2, 1]
        assert controller.blocks[0].lines[1].format.bold is True

    def test_text_count_must_match(self, edit_session):
        with pytest.raises(ValidationError):
            edit_session.submit_texts(["only one"])
        assert edit_session.step is WizardStep.EDIT

    def test_invalid_format_leaves_session_unchanged(self, edit_session):
        with pytest.raises(ValidationError):
            edit_session.submit_texts(edit_session.raw_texts, metadata={"exam_time": "2 hours"}, text_format={"font_size": 0})
        assert edit_session.metadata.exam_time == ""
        assert edit_session.step is WizardStep.EDIT

    def test_back_to_upload_keeps_extracted_text(self, edit_session):
        assert edit_session.go_back() is WizardStep.UPLOAD
        assert sorted(edit_session.extracted) == [0, 1]
        assert edit_session.pending_images == {}


class TestPreviewStep:
    def test_controller_only_on_preview(self, edit_session):
        with pytest.raises(WizardStepError):
            edit_session.controller

    def test_back_keeps_saved_edits(self, preview_session):
        controller = preview_session.controller
        controller.enter_editing()
        controller.update_content(0, "<p>1. Rewritten question</p>")
        controller.save()

        assert preview_session.go_back() is WizardStep.EDIT
        assert preview_session.editor is None
        assert preview_session.raw_texts[0] == "Rewritten question"

    def test_to_dict(self, preview_session):
        data = preview_session.to_dict()

        assert data["step"] == 4
        assert data["step_name"] == "preview"
        assert data["metadata"]["total_marks"] == "80"
        assert data["editor"]["mode"] == "read_only"
        assert len(data["images"]) == 2


class TestSessionStore:
    def test_create_get_discard(self):
        store = SessionStore(max_images=2)
        session = store.create()

        assert store.get(session.session_id) is session
        assert session.max_images == 2
        assert len(store) == 1

        store.discard(session.session_id)
        assert store.get(session.session_id) is None
        assert store.get(None) is None
        assert len(store) == 0
