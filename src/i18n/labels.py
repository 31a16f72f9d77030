"""
Static labels for the two supported paper languages.

``labels_for`` is a total mapping over ``Locale``; the module refuses to
import if a locale is missing a label set.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple

from src.exceptions import ValidationError


class Locale(Enum):
    """Paper language, also used as the OCR language hint."""

    HINDI = "hindi"
    ENGLISH = "english"

    @classmethod
    def parse(cls, value: Any) -> "Locale":
        """Accept a Locale or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for locale in cls:
                if locale.value == value.strip().lower():
                    return locale
        raise ValidationError(
            f"Unsupported language: {value!r}",
            field="language",
            details={"allowed": [locale.value for locale in cls]},
        )


@dataclass(frozen=True)
class LabelSet:
    """Every user-facing string of the wizard and the printed paper."""

    wizard_title: str
    steps: Tuple[str, ...]

    # Details step
    details_title: str
    school_name: str
    select_class: str
    select_subject: str
    select_language: str
    hindi: str
    english: str
    continue_button: str

    # Upload step
    upload_title: str
    upload_text: str
    upload_type_info: str
    selected_images: str
    process_button: str
    processing_text: str
    extraction_error: str
    image_required: str

    # Edit step
    edit_title: str
    exam_time_input: str
    exam_time_placeholder: str
    total_marks_placeholder: str
    exam_term_placeholder: str
    student_fields_toggle: str
    edit_questions: str
    image_text: str
    view_button: str

    # Preview and printed paper
    preview_title: str
    exam_time: str
    total_marks: str
    exam_term: str
    student_name: str
    student_roll: str
    instructions: str
    new_paper_button: str
    back_button: str
    pdf_button: str
    print_button: str
    edit_paper_button: str
    save_edit_button: str
    cancel_edit_button: str
    font_size_label: str
    bold_text: str
    italic_text: str
    alignment_label: str
    left_align: str
    center_align: str
    right_align: str
    generating_pdf: str
    page_text: str
    of: str
    export_error: str
    question: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["steps"] = list(self.steps)
        return data


_HINDI = LabelSet(
    wizard_title="परीक्षा पेपर बनाएँ",
    steps=("विवरण भरें", "तस्वीरें अपलोड करें", "प्रश्न संपादित करें", "पूर्वावलोकन"),
    details_title="परीक्षा पेपर विवरण",
    school_name="स्कूल का नाम",
    select_class="कक्षा चुनें",
    select_subject="विषय चुनें",
    select_language="भाषा चुनें",
    hindi="हिंदी",
    english="अंग्रेजी",
    continue_button="आगे बढ़ें",
    upload_title="तस्वीरें अपलोड करें",
    upload_text="तस्वीरें अपलोड करने के लिए क्लिक करें या खींचकर छोड़ें",
    upload_type_info="PNG, JPG, JPEG (अधिकतम {max_images} तस्वीरें)",
    selected_images="चयनित तस्वीरें",
    process_button="AI से टेक्स्ट निकालें और आगे बढ़ें",
    processing_text="प्रोसेसिंग...",
    extraction_error="तस्वीरों से टेक्स्ट निकालने में समस्या आई है। कृपया पुनः प्रयास करें।",
    image_required="तस्वीर अपलोड करना आवश्यक है",
    edit_title="परीक्षा पेपर संपादन",
    exam_time_input="परीक्षा समय (घंटे)",
    exam_time_placeholder="3 घंटे",
    total_marks_placeholder="100",
    exam_term_placeholder="प्रथम सत्र / द्वितीय सत्र / वार्षिक",
    student_fields_toggle="छात्र विवरण फील्ड जोड़ें",
    edit_questions="प्रश्न संपादित करें",
    image_text="तस्वीर {index} से निकाला गया टेक्स्ट",
    view_button="परीक्षा पेपर देखें",
    preview_title="परीक्षा पेपर प्रीव्यू",
    exam_time="समय",
    total_marks="पूर्णांक",
    exam_term="परीक्षा अवधि",
    student_name="छात्र का नाम",
    student_roll="अनुक्रमांक",
    instructions="",
    new_paper_button="नया परीक्षा पेपर बनाएँ",
    back_button="वापस जाएँ",
    pdf_button="PDF डाउनलोड करें",
    print_button="प्रिंट करें",
    edit_paper_button="पेपर एडिट करें",
    save_edit_button="परिवर्तन सहेजें",
    cancel_edit_button="रद्द करें",
    font_size_label="फ़ॉन्ट आकार:",
    bold_text="बोल्ड",
    italic_text="इटैलिक",
    alignment_label="संरेखण:",
    left_align="बाएँ",
    center_align="केंद्र",
    right_align="दाएँ",
    generating_pdf="PDF बन रहा है...",
    page_text="पृष्ठ",
    of="/",
    export_error="PDF बनाने में समस्या आई है। कृपया पुनः प्रयास करें।",
    question="प्रश्न",
)

_ENGLISH = LabelSet(
    wizard_title="Create Exam Paper",
    steps=("Fill Details", "Upload Images", "Edit Questions", "Preview"),
    details_title="Exam Paper Details",
    school_name="School Name",
    select_class="Select Class",
    select_subject="Select Subject",
    select_language="Select Language",
    hindi="Hindi",
    english="English",
    continue_button="Continue",
    upload_title="Upload Images",
    upload_text="Click or drag and drop to upload images",
    upload_type_info="PNG, JPG, JPEG (Maximum {max_images} images)",
    selected_images="Selected Images",
    process_button="Extract Text with AI and Continue",
    processing_text="Processing...",
    extraction_error="Error extracting text from images. Please try again.",
    image_required="Image upload is required",
    edit_title="Edit Exam Paper",
    exam_time_input="Exam Duration (hours)",
    exam_time_placeholder="3 hours",
    total_marks_placeholder="100",
    exam_term_placeholder="First Term / Second Term / Annual",
    student_fields_toggle="Add Student Detail Fields",
    edit_questions="Edit Questions",
    image_text="Text extracted from Image {index}",
    view_button="View Exam Paper",
    preview_title="Exam Paper Preview",
    exam_time="Duration",
    total_marks="Total Marks",
    exam_term="Exam Term",
    student_name="Student Name",
    student_roll="Roll No.",
    instructions="",
    new_paper_button="Create New Exam Paper",
    back_button="Go Back",
    pdf_button="Download PDF",
    print_button="Print Paper",
    edit_paper_button="Edit Paper",
    save_edit_button="Save Changes",
    cancel_edit_button="Cancel",
    font_size_label="Font Size:",
    bold_text="Bold",
    italic_text="Italic",
    alignment_label="Alignment:",
    left_align="Left",
    center_align="Center",
    right_align="Right",
    generating_pdf="Generating PDF...",
    page_text="Page",
    of="of",
    export_error="Error generating file. Please try again.",
    question="Question",
)

_LABELS: Dict[Locale, LabelSet] = {
    Locale.HINDI: _HINDI,
    Locale.ENGLISH: _ENGLISH,
}

_CLASSES: Dict[Locale, List[str]] = {
    Locale.HINDI: [f"कक्षा {n}" for n in range(1, 13)],
    Locale.ENGLISH: [f"Class {n}" for n in range(1, 13)],
}

_SUBJECTS: Dict[Locale, List[str]] = {
    Locale.HINDI: [
        "हिंदी", "अंग्रेजी", "गणित", "विज्ञान", "सामाजिक विज्ञान",
        "संस्कृत", "कंप्यूटर", "सामान्य ज्ञान", "पर्यावरण अध्ययन",
        "भौतिक विज्ञान", "रसायन विज्ञान", "जीव विज्ञान",
    ],
    Locale.ENGLISH: [
        "Hindi", "English", "Mathematics", "Science", "Social Science",
        "Sanskrit", "Computer", "General Knowledge", "Environmental Studies",
        "Physics", "Chemistry", "Biology",
    ],
}

for _table in (_LABELS, _CLASSES, _SUBJECTS):
    _missing = set(Locale) - set(_table)
    if _missing:
        raise RuntimeError(f"Missing locale entries: {sorted(m.value for m in _missing)}")


def labels_for(locale: Locale) -> LabelSet:
    return _LABELS[locale]


def classes_for(locale: Locale) -> List[str]:
    return list(_CLASSES[locale])


def subjects_for(locale: Locale) -> List[str]:
    return list(_SUBJECTS[locale])
