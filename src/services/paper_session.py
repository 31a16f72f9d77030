"""
Wizard session state for one exam paper.

A ``PaperSession`` is the single object holding everything a browser session
has entered so far: metadata, uploaded images, OCR results, raw texts and,
once the preview step is reached, the edit/preview controller with the
blocks. ``SessionStore`` keeps sessions in memory, keyed by id.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

from src.constants import DEFAULT_FONT_SIZE, DEFAULT_MAX_IMAGES, DEFAULT_SCHOOL_NAME
from src.exceptions import NotFoundError, ValidationError, WizardStepError
from src.i18n.labels import LabelSet, labels_for
from src.models.document_models import DocumentMetadata, ImageUpload, TextFormat
from src.services.edit_mode_controller import EditModeController
from src.services.ocr_service import BatchExtractionResult, GeminiOCRService, ProgressCallback
from utils.logger import logger

REQUIRED_DETAILS = ("school_name", "class_name", "subject")


class WizardStep(IntEnum):
    DETAILS = 1
    UPLOAD = 2
    EDIT = 3
    PREVIEW = 4


class PaperSession:
    """State of one wizard run."""

    def __init__(
        self,
        session_id: Optional[str] = None,
        default_school_name: str = DEFAULT_SCHOOL_NAME,
        default_font_size: float = DEFAULT_FONT_SIZE,
        max_images: int = DEFAULT_MAX_IMAGES,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.max_images = max_images
        self.step = WizardStep.DETAILS

        self.metadata = DocumentMetadata(school_name=default_school_name)
        self.default_format = TextFormat(font_size=default_font_size)

        self.images: List[ImageUpload] = []
        self.extracted: Dict[int, str] = {}
        self.extraction_errors: Dict[int, str] = {}
        self.raw_texts: List[str] = []
        self.editor: Optional[EditModeController] = None

        self.created_at = datetime.utcnow()
        self.updated_at = self.created_at

    @property
    def labels(self) -> LabelSet:
        return labels_for(self.metadata.locale)

    def _require_step(self, step: WizardStep, action: str) -> None:
        if self.step is not step:
            raise WizardStepError(
                f"Cannot {action} from step {self.step.name.lower()}",
                current_step=self.step.name.lower(),
                required_step=step.name.lower(),
            )

    def _touch(self) -> None:
        self.updated_at = datetime.utcnow()

    @property
    def controller(self) -> EditModeController:
        """Edit/preview controller; only exists on the preview step."""
        self._require_step(WizardStep.PREVIEW, "edit the paper")
        return self.editor

    # Step 1: details

    def submit_details(self, values: Dict[str, Any]) -> DocumentMetadata:
        """Store school, class, subject and language, then move to upload."""
        self._require_step(WizardStep.DETAILS, "submit details")

        candidate = replace(self.metadata)
        candidate.update(**values)

        missing = [name for name in REQUIRED_DETAILS if not getattr(candidate, name)]
        if missing:
            raise ValidationError(
                f"Missing required details: {', '.join(missing)}",
                field=missing[0],
                validation_errors=[{"field": name, "message": "This field is required"} for name in missing],
            )

        self.metadata = candidate
        self.step = WizardStep.UPLOAD
        self._touch()
        logger.info(f"Session {self.session_id}: details submitted ({candidate.locale.value})")
        return self.metadata

    # Step 2: upload and extraction

    def add_images(self, uploads: List[ImageUpload]) -> Tuple[List[ImageUpload], int]:
        """Append images up to the limit. Returns the added images and the number ignored."""
        self._require_step(WizardStep.UPLOAD, "upload images")
        room = max(self.max_images - len(self.images), 0)
        added = list(uploads[:room])
        ignored = len(uploads) - len(added)
        self.images.extend(added)
        self._touch()
        if ignored:
            logger.warning(f"Session {self.session_id}: ignored {ignored} image(s) over the limit of {self.max_images}")
        return added, ignored

    def remove_image(self, index: int) -> ImageUpload:
        """Remove an image; results of later images move down one index."""
        self._require_step(WizardStep.UPLOAD, "remove images")
        if not 0 <= index < len(self.images):
            raise NotFoundError(f"Image {index} does not exist", resource_type="image", resource_id=str(index))

        removed = self.images.pop(index)

        def shift(results: Dict[int, Any]) -> Dict[int, Any]:
            return {
                (i if i < index else i - 1): value
                for i, value in results.items()
                if i != index
            }

        self.extracted = shift(self.extracted)
        self.extraction_errors = shift(self.extraction_errors)
        self._touch()
        return removed

    @property
    def pending_images(self) -> Dict[int, ImageUpload]:
        return {i: image for i, image in enumerate(self.images) if i not in self.extracted}

    def run_extraction(
        self,
        ocr_service: GeminiOCRService,
        on_progress: Optional[ProgressCallback] = None,
        max_workers: int = 1,
    ) -> BatchExtractionResult:
        """
        Extract text for every image that has no result yet.

        Successful results are kept across retries. The session moves to the
        edit step only when every image has text.

        Raises:
            ValidationError: If no image has been uploaded
        """
        self._require_step(WizardStep.UPLOAD, "extract text")
        if not self.images:
            message = self.labels.image_required
            raise ValidationError(message, field="images", user_message=message)

        result = ocr_service.extract_batch(
            self.pending_images, self.metadata.locale, on_progress=on_progress, max_workers=max_workers
        )
        self.extracted.update(result.texts)
        self.extraction_errors = {index: error.message for index, error in result.errors.items()}

        if not self.extraction_errors and len(self.extracted) == len(self.images):
            self.raw_texts = [self.extracted[i] for i in range(len(self.images))]
            self.step = WizardStep.EDIT
            logger.info(f"Session {self.session_id}: text extracted from {len(self.images)} image(s)")
        self._touch()
        return result

    # Step 3: raw text and metadata

    def submit_texts(
        self,
        texts: List[str],
        metadata: Optional[Dict[str, Any]] = None,
        text_format: Optional[Dict[str, Any]] = None,
    ) -> EditModeController:
        """Store edited raw texts, exam metadata and default format, then build the blocks."""
        self._require_step(WizardStep.EDIT, "submit texts")
        if len(texts) != len(self.raw_texts):
            raise ValidationError(
                f"Expected {len(self.raw_texts)} text(s), got {len(texts)}",
                field="texts",
            )
        if not all(isinstance(text, str) for text in texts):
            raise ValidationError("Every text must be a string", field="texts")

        default_format = TextFormat.from_dict(text_format or {}, base=self.default_format)
        if metadata:
            self.metadata.update(**metadata)

        self.raw_texts = list(texts)
        self.default_format = default_format
        self.editor = EditModeController(self.raw_texts, self.default_format)
        self.step = WizardStep.PREVIEW
        self._touch()
        return self.editor

    # Navigation

    def go_back(self) -> WizardStep:
        """
        Return to the previous step.

        Leaving upload discards OCR results. Leaving preview keeps saved
        edits as raw text and discards the editor.
        """
        if self.step is WizardStep.DETAILS:
            raise WizardStepError("Already at the first step", current_step="details")

        if self.step is WizardStep.UPLOAD:
            self.extracted = {}
            self.extraction_errors = {}
        elif self.step is WizardStep.PREVIEW:
            if self.editor is not None:
                self.raw_texts = list(self.editor.saved_texts)
            self.editor = None

        self.step = WizardStep(self.step - 1)
        self._touch()
        logger.debug(f"Session {self.session_id}: back to step {self.step.name.lower()}")
        return self.step

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "step": int(self.step),
            "step_name": self.step.name.lower(),
            "metadata": self.metadata.to_dict(),
            "default_format": self.default_format.to_dict(),
            "max_images": self.max_images,
            "images": [image.to_dict() for image in self.images],
            "extracted": sorted(self.extracted),
            "extraction_errors": {str(i): message for i, message in sorted(self.extraction_errors.items())},
            "raw_texts": list(self.raw_texts),
            "editor": self.editor.to_dict() if self.editor else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class SessionStore:
    """In-memory sessions for the lifetime of the process."""

    def __init__(self, **session_defaults):
        self._sessions: Dict[str, PaperSession] = {}
        self._lock = threading.Lock()
        self.session_defaults = session_defaults

    def create(self) -> PaperSession:
        session = PaperSession(**self.session_defaults)
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"Started paper session {session.session_id}")
        return session

    def get(self, session_id: Optional[str]) -> Optional[PaperSession]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: Optional[str]) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
