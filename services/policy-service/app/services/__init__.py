from .attachments import AttachmentRegistry
from .editor import EditorMode, PolicyEditor
from .statement_codec import ParseOk, ParseResult, parse, parse_documents, serialize
from .validator import validate_list, validate_statement

__all__ = [
    "AttachmentRegistry",
    "EditorMode",
    "PolicyEditor",
    "ParseOk",
    "ParseResult",
    "parse",
    "parse_documents",
    "serialize",
    "validate_list",
    "validate_statement",
]
