from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import List, Union

from .errors import TrainingError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".txt", ".md", ".rtf")


def extract_rtf_text(rtf_content: str) -> str:
    """Extract plain text from RTF content."""
    # Remove RTF control words and groups
    text = re.sub(r'\\\*.*?;', '', rtf_content)
    text = re.sub(r'\\[a-z]+-?\d* ?', '', text)
    text = re.sub(r'[{}]', '', text)
    text = re.sub(r'\\[^a-z]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def extract_markdown_text(md_content: str) -> str:
    """Extract plain text from Markdown content."""
    # Code blocks go first so their contents never look like markup
    text = re.sub(r'```.*?```', '', md_content, flags=re.DOTALL)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    text = re.sub(r'^#{1,6}\s+', '', text, flags=re.MULTILINE)
    text = re.sub(r'\*{1,2}(.*?)\*{1,2}', r'\1', text)
    text = re.sub(r'_{1,2}(.*?)_{1,2}', r'\1', text)
    text = re.sub(r'\[([^\]]+)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'^-{3,}$', '', text, flags=re.MULTILINE)
    text = re.sub(r'\n\s*\n', '\n\n', text)
    return text.strip()


def load_text_from_file(path: Union[str, Path]) -> str:
    """Load text content from a file based on its extension."""
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".rtf":
        return extract_rtf_text(content)
    if suffix == ".md":
        return extract_markdown_text(content)
    return content


def load_corpus(folder: Union[str, Path]) -> List[str]:
    """Texts of every supported file under `folder` (subfolders included), ordered by path."""
    folder = Path(folder)
    if not folder.is_dir():
        raise TrainingError(f"Training corpus folder not found: {folder}")

    texts = []
    for path in sorted(folder.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in SUPPORTED_SUFFIXES:
            continue
        try:
            texts.append(load_text_from_file(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable corpus file %s: %s", path, e)
    logger.info("Loaded %d training texts from %s", len(texts), folder)
    return texts
