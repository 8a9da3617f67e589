import pymupdf

_INVISIBLE = 3
_MAX_FONT_SIZE = 8.0
_MIN_FONT_SIZE = 1.0
_MARGIN = 2.0


def overlay_text_layer(pdf_bytes: bytes, page_texts: list[str]) -> bytes:
    """Write recognized text invisibly onto pages that have no native text.

    Pages that already carry a text layer, or whose recognized text is
    empty, are left alone. Returns the input unchanged when nothing was
    written.
    """
    with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
        written = 0
        for page, text in zip(doc, page_texts):
            if not text.strip() or page.get_text().strip():
                continue
            lines = text.splitlines() or [text]
            fontsize = _fit_font_size(page.rect.height, len(lines))
            page.insert_text(
                (_MARGIN, _MARGIN + fontsize),
                "\n".join(lines),
                fontsize=fontsize,
                fontname="helv",
                render_mode=_INVISIBLE,
            )
            written += 1
        if not written:
            return pdf_bytes
        return doc.tobytes(garbage=3, deflate=True)


def _fit_font_size(page_height: float, line_count: int) -> float:
    usable = max(page_height - 2 * _MARGIN, 1.0)
    size = usable / (max(line_count, 1) * 1.2)
    return max(_MIN_FONT_SIZE, min(_MAX_FONT_SIZE, size))
