from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from html import escape

from techpack import config
from techpack.recoverer import recover_tech_pack
from techpack.schema import BomRowModel, TechPackRecordModel


logger = logging.getLogger(__name__)

BOM_HEADERS = ("#", "ITEM", "DESCRIPTION", "COLOR", "CODE", "QTY", "SUPPLIER")


@dataclass
class TechPackExport:
    record: TechPackRecordModel
    html: str
    filename: str


def _bom_rows(record: TechPackRecordModel) -> list[BomRowModel]:
    by_label = {row.label: row for row in record.bom_items}
    return [by_label.get(label) or BomRowModel(label=label) for label in config.BOM_ROW_LABELS]


def _render_info_cell(label: str, value: str) -> str:
    return (
        "<td class='info-cell'>"
        f"<div class='info-label'>{escape(label)}</div>"
        f"<div class='info-value'>{escape(value)}</div>"
        "</td>"
    )


def _render_image_cell(label: str, image_url: str | None) -> str:
    if image_url:
        body = f"<img src='{escape(image_url, quote=True)}' alt='{escape(label)}'>"
    else:
        body = "<div class='image-empty'>No image</div>"
    return f"<td class='image-cell'><div class='info-label'>{escape(label)}</div>{body}</td>"


def _render_bom_table(record: TechPackRecordModel) -> str:
    header = "".join(f"<th>{escape(h)}</th>" for h in BOM_HEADERS)
    rows = []
    for idx, row in enumerate(_bom_rows(record)):
        shade = " style='background:#f9f9f9;'" if idx % 2 == 1 else ""
        cells = "".join(f"<td>{escape(cell)}</td>" for cell in row.cells())
        rows.append(f"<tr{shade}><td class='bom-label'>{escape(row.label)}</td>{cells}</tr>")
    return f"<table class='bom'><thead><tr>{header}</tr></thead><tbody>{''.join(rows)}</tbody></table>"


def render_cover_sheet_html(record: TechPackRecordModel, year: int | None = None) -> str:
    info = record.info
    year = year or date.today().year

    attribute_rows = (
        "<tr>"
        + _render_info_cell("BRAND", info.brand)
        + _render_info_cell("DESIGNER", info.designer)
        + _render_info_cell("DESCRIPTION", info.description)
        + "</tr><tr>"
        + _render_info_cell("SEASON", info.season)
        + _render_info_cell("DATE", info.date)
        + _render_info_cell("MAIN FABRIC", info.main_fabric)
        + "</tr><tr>"
        + _render_info_cell("STYLE NAME", info.style_name)
        + _render_info_cell("STYLE #", info.style_number)
        + _render_info_cell("SIZE RANGE", info.size_range)
        + "</tr>"
    )

    return (
        "<!doctype html>"
        f"<html><head><meta charset='utf-8'><title>{escape(record.document_title)}</title>"
        "<style>"
        "body{font-family:Helvetica,Arial,sans-serif;max-width:1100px;margin:24px auto;padding:0 16px;color:#1f1f1f;}"
        ".header{display:flex;justify-content:space-between;background:#111;color:#fff;padding:10px 16px;}"
        ".header .brand{font-weight:bold;letter-spacing:2px;}"
        "table{width:100%;border-collapse:collapse;margin-top:12px;}"
        "td,th{border:1px solid #ccc;padding:6px 8px;vertical-align:top;font-size:12px;}"
        ".info-label{font-size:10px;color:#777;}"
        ".info-value{font-weight:bold;}"
        ".image-cell img{max-width:100%;max-height:320px;}"
        ".image-empty{color:#aaa;padding:40px 0;text-align:center;}"
        ".bom th{background:#111;color:#fff;text-align:left;}"
        ".bom-label{font-weight:bold;width:24px;}"
        ".footer{margin-top:16px;font-size:10px;color:#777;text-align:center;}"
        "</style></head><body>"
        "<div class='header'><span class='brand'>TECHPACKS.CO</span><span>COVER SHEET</span></div>"
        f"<table class='info'>{attribute_rows}</table>"
        "<table class='images'><tr>"
        + _render_image_cell("FABRIC SWATCH", None)
        + _render_image_cell("SKETCH", record.sketch_image_url)
        + "</tr></table>"
        + _render_bom_table(record)
        + f"<div class='footer'>&copy; COPYRIGHT OF {escape(info.brand)} {year}. "
        f"THIS DESIGN IS THE PROPERTY OF {escape(info.brand)}</div>"
        "</body></html>"
    )


def export_filename(title: str) -> str:
    base = re.sub(r"[^A-Za-z0-9._-]+", "_", (title or "").strip()).strip("._")
    return f"{base or 'Document'}_TechPack.html"


def export_tech_pack(content: str, defaults: dict[str, str] | None = None) -> TechPackExport:
    record = recover_tech_pack(content, defaults=defaults)
    logger.info(
        "Recovered tech pack '%s' with %s BOM rows", record.document_title, len(record.bom_items)
    )
    return TechPackExport(
        record=record,
        html=render_cover_sheet_html(record),
        filename=export_filename(record.document_title),
    )
