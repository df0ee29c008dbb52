# inventario/word.py
"""Relleno de la plantilla .docx de resguardo con python-docx.

La plantilla usa etiquetas {campo} en párrafos y celdas de tabla; cada
etiqueta debe existir en el diccionario de datos.
"""
import re
from io import BytesIO

from docx import Document

DOCX_MIMETYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

TAG_RE = re.compile(r"\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}")


class TemplateError(Exception):
    """La plantilla pide un campo que no está en los datos."""


def _iter_paragraphs(container):
    for p in container.paragraphs:
        yield p
    for table in container.tables:
        for row in table.rows:
            for cell in row.cells:
                yield from _iter_paragraphs(cell)


def _containers(document):
    yield document
    for section in document.sections:
        # sólo encabezados/pies propios; acceder a uno vinculado lo crea
        if not section.header.is_linked_to_previous:
            yield section.header
        if not section.footer.is_linked_to_previous:
            yield section.footer


def _fill_paragraph(paragraph, data):
    runs = paragraph.runs
    # Word suele partir una etiqueta en varios runs: se trabaja sobre el texto unido
    text = "".join(r.text for r in runs)
    if "{" not in text:
        return

    def sub(m):
        key = m.group(1)
        if key not in data:
            raise TemplateError(f"La plantilla usa {{{key}}} pero no hay dato con ese nombre")
        value = data[key]
        return "" if value is None else str(value)

    new_text = TAG_RE.sub(sub, text)
    if new_text == text:
        return
    runs[0].text = new_text
    for r in runs[1:]:
        r.text = ""


def fill_template(template_path, data):
    """Devuelve un BytesIO con el documento ya rellenado."""
    document = Document(template_path)
    for container in _containers(document):
        for paragraph in _iter_paragraphs(container):
            _fill_paragraph(paragraph, data)
    bio = BytesIO()
    document.save(bio)
    bio.seek(0)
    return bio


def template_tags(template_path):
    """Etiquetas presentes en la plantilla (diagnóstico en /admin/template-check)."""
    document = Document(template_path)
    tags = set()
    for container in _containers(document):
        for paragraph in _iter_paragraphs(container):
            text = "".join(r.text for r in paragraph.runs)
            tags.update(TAG_RE.findall(text))
    return sorted(tags)
