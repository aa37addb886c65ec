"""Display labels for message parts and usage metadata."""

from urllib.parse import urlparse

from chatstream.models.messages import FilePart, SourceDocumentPart, SourceUrlPart, UIMessage


def source_url_label(part: SourceUrlPart) -> str:
    """Citation label: the title, or the URL's host name when untitled."""
    if part.title:
        return part.title
    return urlparse(part.url).hostname or part.url


def source_document_label(part: SourceDocumentPart, index: int) -> str:
    return part.title or f"Document {index}"


def is_image(part: FilePart) -> bool:
    return part.media_type.startswith("image/")


def usage_label(message: UIMessage) -> str | None:
    """Token usage line shown under a finished message, if usage is known."""
    if message.metadata is None or message.metadata.total_usage is None:
        return None
    return f"Tokens utilizzati: {message.metadata.total_usage.total_tokens}"
