"""
Transformacion del markup de WordPress a texto canonico.

El pipeline es una tupla ordenada de etapas puras `(name, rule)`: cada regla
recibe la salida de la anterior. Sin I/O ni estado compartido, asi cada etapa
se puede testear por separado.

Orden de CONTENT_STAGES:
1. strip_wordpress_blocks  comentarios wp:, wrappers wp-block y shortcodes de media
2. headings                <hN> -> "#" * N
3. emphasis                <em>/<i> -> _x_, <strong>/<b> -> **x**
4. list_items              <li> -> "- x"
5. blockquotes             cada linea -> "> linea"
6. paragraphs              <br> -> salto, <p> -> parrafo
7. strip_tags              elimina el resto de tags
8. decode_entities         entidades HTML
9. collapse_whitespace     normaliza espacios y saltos
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from horrorsite.core.config import settings
from horrorsite.shared.exceptions.sync import TransformError

Rule = Callable[[str], str]

EXCERPT_MARKER = "..."

_FLAGS = re.IGNORECASE | re.DOTALL

# Shortcodes de media que se eliminan con su contenido. El resto de texto
# entre corchetes ("[Parte 2]") se conserva.
_MEDIA_SHORTCODES = "caption|gallery|embed|audio|video|playlist"

_WP_COMMENT_RE = re.compile(r"<!--\s*/?wp:.*?-->", _FLAGS)
_WP_BLOCK_WRAPPER_RE = re.compile(
    r"<(ul|div)\s[^>]*class=[\"'][^\"']*\bwp-block[^>]*>.*?</\1\s*>", _FLAGS
)
_PAIRED_SHORTCODE_RE = re.compile(
    rf"\[({_MEDIA_SHORTCODES})\b[^\]]*\].*?\[/\1\]", _FLAGS
)
_LONE_SHORTCODE_RE = re.compile(rf"\[/?(?:{_MEDIA_SHORTCODES})\b[^\]]*\]", re.IGNORECASE)

_HEADING_RE = re.compile(r"<h([1-6])(?:\s[^>]*)?>(.*?)</h\1\s*>", _FLAGS)
_EM_RE = re.compile(r"<(em|i)(?:\s[^>]*)?>([^<]+)</\1\s*>", re.IGNORECASE)
_STRONG_RE = re.compile(r"<(strong|b)(?:\s[^>]*)?>([^<]+)</\1\s*>", re.IGNORECASE)
_LI_RE = re.compile(r"<li(?:\s[^>]*)?>(.*?)</li\s*>", _FLAGS)
_BLOCKQUOTE_RE = re.compile(r"<blockquote(?:\s[^>]*)?>(.*?)</blockquote\s*>", _FLAGS)
_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_P_OPEN_RE = re.compile(r"<p(?:\s[^>]*)?>", re.IGNORECASE)
_P_CLOSE_RE = re.compile(r"</p\s*>", re.IGNORECASE)

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"</?[A-Za-z!][^>]*>")

_ENTITY_RE = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z]+);")

# Comillas tipograficas -> ASCII
_NAMED_ENTITIES = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "ndash": "–",
    "mdash": "—",
    "lsquo": "'",
    "rsquo": "'",
    "ldquo": '"',
    "rdquo": '"',
    "hellip": "…",
}
_CODEPOINT_OVERRIDES = {
    39: "'",
    160: " ",
    8216: "'",
    8217: "'",
    8220: '"',
    8221: '"',
}


def strip_wordpress_blocks(text: str) -> str:
    text = _WP_COMMENT_RE.sub("", text)
    text = _WP_BLOCK_WRAPPER_RE.sub("", text)
    text = _PAIRED_SHORTCODE_RE.sub("", text)
    return _LONE_SHORTCODE_RE.sub("", text)


def convert_headings(text: str) -> str:
    def _heading(match: re.Match) -> str:
        level = int(match.group(1))
        return f"\n\n{'#' * level} {match.group(2).strip()}\n\n"

    return _HEADING_RE.sub(_heading, text)


def convert_emphasis(text: str) -> str:
    text = _EM_RE.sub(lambda m: f"_{m.group(2)}_", text)
    return _STRONG_RE.sub(lambda m: f"**{m.group(2)}**", text)


def convert_list_items(text: str) -> str:
    return _LI_RE.sub(lambda m: f"- {m.group(1).strip()}\n", text)


def convert_blockquotes(text: str) -> str:
    def _quote(match: re.Match) -> str:
        inner = _BR_RE.sub("\n", match.group(1))
        inner = _P_OPEN_RE.sub("\n", inner)
        inner = _P_CLOSE_RE.sub("\n", inner)
        lines = [line.strip() for line in inner.split("\n")]
        quoted = "\n".join(f"> {line}" for line in lines if line)
        return f"\n\n{quoted}\n\n"

    return _BLOCKQUOTE_RE.sub(_quote, text)


def convert_paragraphs(text: str) -> str:
    text = _BR_RE.sub("\n", text)
    text = _P_OPEN_RE.sub("\n\n", text)
    return _P_CLOSE_RE.sub("\n\n", text)


def strip_tags(text: str) -> str:
    text = _COMMENT_RE.sub("", text)
    return _TAG_RE.sub("", text)


def _decode_entity(match: re.Match) -> str:
    token = match.group(1)
    if not token.startswith("#"):
        return _NAMED_ENTITIES.get(token.lower(), match.group(0))

    if token[1:2] in ("x", "X"):
        codepoint = int(token[2:], 16)
    else:
        codepoint = int(token[1:])

    if codepoint in _CODEPOINT_OVERRIDES:
        return _CODEPOINT_OVERRIDES[codepoint]
    # Fuera de rango, NUL o surrogates: se deja la entidad intacta
    if codepoint <= 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return match.group(0)
    return chr(codepoint)


def decode_entities(text: str) -> str:
    # Una sola pasada: "&amp;lt;" queda como "&lt;"
    return _ENTITY_RE.sub(_decode_entity, text)


def collapse_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t\u00a0]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


@dataclass(frozen=True)
class TransformStage:
    """Etapa del pipeline: nombre estable (para errores y tests) + regla pura."""

    name: str
    rule: Rule


CONTENT_STAGES: tuple[TransformStage, ...] = (
    TransformStage("strip_wordpress_blocks", strip_wordpress_blocks),
    TransformStage("headings", convert_headings),
    TransformStage("emphasis", convert_emphasis),
    TransformStage("list_items", convert_list_items),
    TransformStage("blockquotes", convert_blockquotes),
    TransformStage("paragraphs", convert_paragraphs),
    TransformStage("strip_tags", strip_tags),
    TransformStage("decode_entities", decode_entities),
    TransformStage("collapse_whitespace", collapse_whitespace),
)

TITLE_STAGES: tuple[TransformStage, ...] = tuple(
    stage for stage in CONTENT_STAGES
    if stage.name in ("strip_tags", "decode_entities", "collapse_whitespace")
)


def run_stages(stages: tuple[TransformStage, ...], markup: Any) -> str:
    """
    Aplica las etapas en orden.

    Raises:
        TransformError: si alguna regla lanza; lleva el nombre de la etapa
    """
    if not markup:
        return ""

    text = markup
    for stage in stages:
        try:
            text = stage.rule(text)
        except Exception as e:
            raise TransformError(stage.name, e) from e
    return text


@dataclass(frozen=True)
class TransformedFields:
    """Campos canonicos derivados de un post del feed."""

    title: str
    content: str
    excerpt: str
    word_count: int
    reading_time_minutes: int


class ContentTransformer:
    """
    Convierte markup de WordPress en los campos canonicos de un post.

    Args:
        excerpt_length: Limite de caracteres del extracto (sin contar "...")
        words_per_minute: Velocidad de lectura para estimar minutos
    """

    def __init__(
        self,
        excerpt_length: Optional[int] = None,
        words_per_minute: Optional[int] = None,
        stages: tuple[TransformStage, ...] = CONTENT_STAGES,
    ):
        self.excerpt_length = settings.SYNC_EXCERPT_LENGTH if excerpt_length is None else excerpt_length
        self.words_per_minute = words_per_minute or settings.SYNC_WORDS_PER_MINUTE
        self.stages = stages

    def transform(self, markup: Any) -> str:
        """Markup del cuerpo -> texto canonico."""
        return run_stages(self.stages, markup)

    def clean_title(self, markup: Any) -> str:
        """Titulo sin tags ni entidades."""
        return run_stages(TITLE_STAGES, markup)

    def truncate_excerpt(self, text: str) -> str:
        """
        Corta en un offset fijo de caracteres; "..." solo si hubo corte.
        """
        if len(text) <= self.excerpt_length:
            return text
        return text[: self.excerpt_length].rstrip() + EXCERPT_MARKER

    def build_excerpt(self, excerpt_markup: Any, content: str) -> str:
        """
        Usa el extracto del feed si trae texto; si no, el contenido canonico.
        """
        source = self.transform(excerpt_markup) if excerpt_markup else ""
        return self.truncate_excerpt(source or content)

    @staticmethod
    def count_words(text: str) -> int:
        return len(text.split())

    def estimate_reading_time(self, text: str) -> int:
        """Minutos de lectura, nunca menos de 1."""
        return max(1, math.ceil(self.count_words(text) / self.words_per_minute))

    def transform_record(self, title_markup: Any, content_markup: Any, excerpt_markup: Any) -> TransformedFields:
        content = self.transform(content_markup)
        word_count = self.count_words(content)
        return TransformedFields(
            title=self.clean_title(title_markup),
            content=content,
            excerpt=self.build_excerpt(excerpt_markup, content),
            word_count=word_count,
            reading_time_minutes=self.estimate_reading_time(content),
        )
